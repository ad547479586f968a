"""Building blocks of a discovery pass"""

from .address import IPAddress, IPv4Address, network_and_broadcast
from .subnet_ranges import SubnetRange, derive_usable_ranges, usable_range
from .peer_probe import PeerProbe, DEFAULT_PROBE_TIMEOUT
from .listener import ListenerServer, start_listener

__all__ = [
    "IPAddress",
    "IPv4Address",
    "network_and_broadcast",
    "SubnetRange",
    "derive_usable_ranges",
    "usable_range",
    "PeerProbe",
    "DEFAULT_PROBE_TIMEOUT",
    "ListenerServer",
    "start_listener",
]
