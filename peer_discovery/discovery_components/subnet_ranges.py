"""
Subnet Ranges - usable host ranges for a set of interface addresses
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .address import IPAddress, network_and_broadcast


@dataclass(frozen=True)
class SubnetRange:
    """First and last usable host of one subnet"""
    first: IPAddress
    last: IPAddress

    @property
    def is_empty(self) -> bool:
        return self.first > self.last

    def hosts(self) -> Iterator[IPAddress]:
        """Lazily yield every host from first to last"""
        if self.is_empty:
            return iter(())
        return self.first.iter_to(self.last)

    def __len__(self) -> int:
        if self.is_empty:
            return 0
        return self.last.value - self.first.value + 1

    def __str__(self) -> str:
        return f"{self.first.address}-{self.last.address}/{self.first.cidr}"


def usable_range(ip: IPAddress) -> Optional[SubnetRange]:
    """
    Usable host range of the subnet ip belongs to.

    Network and broadcast addresses are always left out, so /31 and /32
    subnets have nothing to scan and give None.
    """
    network, broadcast = network_and_broadcast(ip)
    if broadcast.value - network.value < 2:
        return None
    return SubnetRange(network + 1, broadcast - 1)


def derive_usable_ranges(addresses: Iterable[IPAddress],
                         logger: Optional[logging.Logger] = None) -> List[SubnetRange]:
    """
    Derive the usable host ranges of every interface subnet.

    Args:
        addresses: Interface addresses with their prefix lengths
        logger: Optional logger for skipped subnets

    Returns:
        Ranges in first-seen order, duplicate subnets collapsed to one
    """
    ranges: List[SubnetRange] = []
    seen = set()

    for ip in addresses:
        subnet = usable_range(ip)
        if subnet is None:
            if logger:
                logger.debug(f"Skipping {ip}: subnet has no usable host range")
            continue
        if subnet in seen:
            continue
        seen.add(subnet)
        ranges.append(subnet)

    return ranges
