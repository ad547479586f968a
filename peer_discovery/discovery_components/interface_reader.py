"""
Interface Reader - IPv4 addresses configured on this host

Reads the host interfaces through psutil. Only IPv4 entries that carry a
netmask and a broadcast address are kept, which leaves loopback out.
"""

import socket
from typing import List

import psutil

from ..core.exceptions import MalformedAddress, NoActiveInterfaces
from .address import IPAddress, IPv4Address


def prefix_length(netmask: str) -> int:
    """Convert a dotted netmask such as 255.255.255.0 to its prefix length"""
    mask = IPv4Address.parse(netmask, 32).value
    length = bin(mask).count('1')
    if mask != (IPv4Address.MAX_VALUE << (32 - length)) & IPv4Address.MAX_VALUE:
        raise MalformedAddress(f"Non-contiguous netmask: {netmask}")
    return length


class NetworkInterfaceReader:
    """Source of interface addresses for discovery"""

    def network_interfaces(self) -> List[IPAddress]:
        """
        Return every active IPv4 interface address on the host.

        Raises:
            NoActiveInterfaces: no interface qualifies
        """
        addresses: List[IPAddress] = []

        for _interface, entries in psutil.net_if_addrs().items():
            for entry in entries:
                if entry.family != socket.AF_INET:
                    continue
                if not entry.netmask or not entry.broadcast:
                    continue
                addresses.append(IPv4Address.parse(entry.address, prefix_length(entry.netmask)))

        if not addresses:
            raise NoActiveInterfaces("There were no active network interfaces detected.")
        return addresses
