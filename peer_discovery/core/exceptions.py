"""
Exceptions raised by Peer Discovery

Address validation errors are raised where the value is built or compared.
Collaborator and scan outcomes are named so callers can tell "nothing to
scan" apart from "scanned and nobody answered".
"""


class PeerDiscoveryError(Exception):
    """Base class for every error raised by the library"""


class MalformedAddress(PeerDiscoveryError, ValueError):
    """Textual address or prefix length failed validation"""


class AddressOverflow(PeerDiscoveryError, ValueError):
    """Arithmetic moved an address outside the 32-bit space"""


class IncomparableType(PeerDiscoveryError, TypeError):
    """An address was compared against something that is not an address"""


class NoActiveInterfaces(PeerDiscoveryError):
    """The host reports no usable IPv4 interface"""


class NoAddressMatchesFilter(PeerDiscoveryError):
    """None of the interface addresses satisfied the caller's filter"""


class NoPeersFound(PeerDiscoveryError):
    """The scan finished but no candidate answered"""


class ConfigError(PeerDiscoveryError):
    """Configuration file or environment override is invalid"""
