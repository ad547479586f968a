"""
Peer Discovery - subnet scanning for cluster peers

Finds nodes listening on a port across the subnets of this host's
interfaces, and runs the beacon that lets other nodes find this one.
"""

from .core.exceptions import (
    PeerDiscoveryError,
    MalformedAddress,
    AddressOverflow,
    IncomparableType,
    NoActiveInterfaces,
    NoAddressMatchesFilter,
    NoPeersFound,
    ConfigError,
)
from .core.config import DiscoveryConfig, load_config
from .discovery_components.address import IPAddress, IPv4Address, network_and_broadcast
from .discovery_components.subnet_ranges import SubnetRange, derive_usable_ranges
from .discovery_components.peer_probe import PeerProbe
from .discovery_components.listener import ListenerServer, start_listener
from .discovery import DiscoveryCoordinator, find_peers
from .discovery_client import PeerDiscoveryClient, create_discovery_client, prefix_filter

__version__ = "0.1.0"
__all__ = [
    "PeerDiscoveryError",
    "MalformedAddress",
    "AddressOverflow",
    "IncomparableType",
    "NoActiveInterfaces",
    "NoAddressMatchesFilter",
    "NoPeersFound",
    "ConfigError",
    "DiscoveryConfig",
    "load_config",
    "IPAddress",
    "IPv4Address",
    "network_and_broadcast",
    "SubnetRange",
    "derive_usable_ranges",
    "PeerProbe",
    "ListenerServer",
    "start_listener",
    "DiscoveryCoordinator",
    "find_peers",
    "PeerDiscoveryClient",
    "create_discovery_client",
    "prefix_filter",
]
