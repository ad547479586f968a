"""
Peer Discovery Client - network manager facade

Ties the host interface reader, the discovery coordinator and the presence
listener together behind one object.
"""

import logging
from typing import Callable, Iterable, List, Optional, Set

from .core.config import DiscoveryConfig
from .core.exceptions import NoActiveInterfaces, NoAddressMatchesFilter
from .discovery import DiscoveryCoordinator
from .discovery_components.address import IPAddress
from .discovery_components.interface_reader import NetworkInterfaceReader
from .discovery_components.listener import ListenerServer, start_listener
from .discovery_components.peer_probe import PeerProbe


AddressFilter = Callable[[IPAddress], bool]


def prefix_filter(prefix: str) -> AddressFilter:
    """Filter accepting addresses whose dotted text starts with prefix"""
    def matches(ip: IPAddress) -> bool:
        return ip.address.startswith(prefix)
    matches.__name__ = f"starts_with_{prefix}"
    return matches


class PeerDiscoveryClient:
    """
    Network information provider for a cluster node

    Answers which addresses this host has, which peers sit on the same
    subnets, and starts the beacon that lets other nodes find this one.
    """

    def __init__(self, coordinator: Optional[DiscoveryCoordinator] = None,
                 interface_reader: Optional[NetworkInterfaceReader] = None,
                 listener_factory: Callable[..., ListenerServer] = start_listener,
                 listen_host: str = "",
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.coordinator = coordinator or DiscoveryCoordinator(logger=self.logger)
        self.interface_reader = interface_reader or NetworkInterfaceReader()
        self.listener_factory = listener_factory
        self.listen_host = listen_host

    def get_host_addresses(self) -> List[IPAddress]:
        """
        All IPv4 addresses configured on the host.

        Raises:
            NoActiveInterfaces: the host has no usable interface
        """
        self.logger.info("Finding all configured network interface addresses ...")
        addresses = self._retrieve_addresses(None)
        self.logger.info(f"Found interfaces: {[str(a) for a in addresses]}, on host.")
        return addresses

    def get_host_addresses_which(self, predicate: AddressFilter) -> List[IPAddress]:
        """
        Host addresses accepted by predicate.

        Raises:
            NoActiveInterfaces: the host has no usable interface
            NoAddressMatchesFilter: no address passed the predicate
        """
        self.logger.info(
            f"Finding all configured network interface addresses which match "
            f"{getattr(predicate, '__name__', predicate)} ..."
        )
        addresses = self._retrieve_addresses(predicate)
        self.logger.info(f"Found interfaces: {[str(a) for a in addresses]}, matching predicate on host.")
        return addresses

    def get_adjacent_peers(self, port: int, predicate: Optional[AddressFilter] = None,
                           local_interfaces: Optional[Iterable[IPAddress]] = None) -> Set[IPAddress]:
        """
        Scan the subnets of the host interfaces for peers listening on port.

        Args:
            port: Port peers listen on
            predicate: Optional filter applied to the interface addresses
            local_interfaces: Use these instead of reading the host

        Raises:
            NoActiveInterfaces, NoAddressMatchesFilter, NoPeersFound
        """
        if local_interfaces is None:
            interfaces = self._retrieve_addresses(predicate)
        else:
            interfaces = list(local_interfaces)
            if not interfaces:
                raise NoActiveInterfaces("No interface addresses were supplied.")
            interfaces = self._apply_filter(interfaces, predicate)

        self.logger.info(f"Scanning for adjacent device addresses on network on port {port} ...")
        return self.coordinator.find_peers(interfaces, port)

    def listen_for_joiners(self, port: int) -> ListenerServer:
        """Start the presence beacon on port"""
        self.logger.info(f"Starting listener server on port {port} listening for joiners to network.")
        return self.listener_factory(port, host=self.listen_host, logger=self.logger)

    def _retrieve_addresses(self, predicate: Optional[AddressFilter]) -> List[IPAddress]:
        return self._apply_filter(self.interface_reader.network_interfaces(), predicate)

    def _apply_filter(self, addresses: List[IPAddress],
                      predicate: Optional[AddressFilter]) -> List[IPAddress]:
        if predicate is None:
            return addresses
        eligible = [ip for ip in addresses if predicate(ip)]
        if not eligible:
            raise NoAddressMatchesFilter("None of the available addresses match the filter supplied.")
        return eligible


def create_discovery_client(config: Optional[DiscoveryConfig] = None,
                            logger: Optional[logging.Logger] = None) -> PeerDiscoveryClient:
    """
    Build a client wired from a DiscoveryConfig.

    Args:
        config: Settings, defaults to DiscoveryConfig()
        logger: Logger shared by every component

    Returns:
        Configured PeerDiscoveryClient
    """
    config = config or DiscoveryConfig()
    logger = logger or logging.getLogger("peer_discovery")

    coordinator = DiscoveryCoordinator(
        probe=PeerProbe(timeout=config.timeout, logger=logger),
        max_workers=config.max_workers,
        deadline=config.deadline,
        logger=logger,
    )
    return PeerDiscoveryClient(coordinator=coordinator, listen_host=config.listen_host, logger=logger)
