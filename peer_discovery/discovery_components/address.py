"""
Address - IPv4 value type with subnet arithmetic

An address is stored as an unsigned 32-bit integer together with its CIDR
prefix length, so ordering, arithmetic and network/broadcast derivation are
plain integer operations. Instances are immutable; every operation returns a
new address.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

from ..core.exceptions import AddressOverflow, IncomparableType, MalformedAddress


_OCTET = re.compile(r'[0-9]{1,3}')


class IPAddress(ABC):
    """
    Capability set shared by every address family.

    Only IPv4 is implemented. Another family would be a sibling of
    IPv4Address implementing the same methods.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def address(self) -> str:
        """Host part in textual form, without the prefix"""

    @property
    @abstractmethod
    def value(self) -> int:
        """Address as an unsigned integer"""

    @property
    @abstractmethod
    def cidr(self) -> int:
        """Prefix length"""

    @abstractmethod
    def compare(self, other: "IPAddress") -> int:
        """Return -1, 0 or 1 ordering self against other"""

    @abstractmethod
    def __add__(self, inc: int) -> "IPAddress":
        ...

    @abstractmethod
    def __sub__(self, dec: int) -> "IPAddress":
        ...

    @abstractmethod
    def iter_to(self, other: "IPAddress") -> Iterator["IPAddress"]:
        """Lazily walk from self to other, both ends included"""

    @abstractmethod
    def network_address(self) -> "IPAddress":
        ...

    @abstractmethod
    def broadcast_address(self) -> "IPAddress":
        ...

    def to(self, other: "IPAddress") -> List["IPAddress"]:
        """Materialize the inclusive range from self to other"""
        return list(self.iter_to(other))


class IPv4Address(IPAddress):
    """
    IPv4 host address plus prefix length.

    Equality needs both the 32-bit value and the prefix to match. Ordering
    looks at the 32-bit value only.

    Example:
        >>> ip = IPv4Address.parse("192.168.1.9", 24)
        >>> str(ip.network_address())
        '192.168.1.0/24'
    """

    __slots__ = ('_value', '_cidr')

    BITS = 32
    MAX_VALUE = 0xFFFFFFFF

    def __init__(self, value: int, cidr: int):
        if not isinstance(value, int) or not 0 <= value <= self.MAX_VALUE:
            raise MalformedAddress(f"Address value must be in [0, {self.MAX_VALUE}], got {value!r}")
        if not isinstance(cidr, int) or not 0 <= cidr <= self.BITS:
            raise MalformedAddress(f"Prefix length must be in [0, {self.BITS}], got {cidr!r}")
        self._value = value
        self._cidr = cidr

    @classmethod
    def parse(cls, text: str, cidr: int) -> "IPv4Address":
        """
        Parse dotted-quad text such as "192.168.1.1".

        Args:
            text: Four period-separated decimal octets, 1-3 digits each
            cidr: Prefix length in [0, 32]

        Returns:
            New IPv4Address

        Raises:
            MalformedAddress: text or prefix fails validation
        """
        if not isinstance(text, str):
            raise MalformedAddress(f"Address must be a string, got {type(text).__name__}")

        octets = text.split('.')
        if len(octets) != 4 or not all(_OCTET.fullmatch(octet) for octet in octets):
            raise MalformedAddress(
                f"{text!r}: the address must contain 4 octets with each char in the range [0-9], "
                "eg: xxx.xxx.xxx.xxx"
            )

        value = 0
        for octet in octets:
            number = int(octet)
            if number > 255:
                raise MalformedAddress(f"{text!r}: no single octet may be above 255")
            value = (value << 8) | number

        return cls(value, cidr)

    @property
    def value(self) -> int:
        return self._value

    @property
    def cidr(self) -> int:
        return self._cidr

    @property
    def address(self) -> str:
        return '.'.join(str((self._value >> shift) & 0xFF) for shift in (24, 16, 8, 0))

    @property
    def netmask(self) -> int:
        """Top `cidr` bits set"""
        return (self.MAX_VALUE << (self.BITS - self._cidr)) & self.MAX_VALUE

    def _checked(self, other) -> "IPv4Address":
        if not isinstance(other, IPv4Address):
            raise IncomparableType(
                f"Cannot compare {type(self).__name__} with {type(other).__name__}"
            )
        return other

    def compare(self, other: IPAddress) -> int:
        other = self._checked(other)
        if self._value < other._value:
            return -1
        if self._value > other._value:
            return 1
        return 0

    def __eq__(self, other) -> bool:
        other = self._checked(other)
        return self._value == other._value and self._cidr == other._cidr

    def __ne__(self, other) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((self._value, self._cidr))

    def __lt__(self, other) -> bool:
        return self.compare(other) < 0

    def __le__(self, other) -> bool:
        return self < other or self == other

    def __gt__(self, other) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other) -> bool:
        return self > other or self == other

    def _shifted(self, value: int) -> "IPv4Address":
        if not 0 <= value <= self.MAX_VALUE:
            raise AddressOverflow(f"{self} shifted outside the IPv4 address space")
        return IPv4Address(value, self._cidr)

    def __add__(self, inc: int) -> "IPv4Address":
        if not isinstance(inc, int):
            return NotImplemented
        return self._shifted(self._value + inc)

    def __sub__(self, dec: int) -> "IPv4Address":
        if not isinstance(dec, int):
            return NotImplemented
        return self._shifted(self._value - dec)

    def iter_to(self, other: IPAddress) -> Iterator["IPv4Address"]:
        """
        Walk one address at a time from self towards other.

        Steps up when self is lower and down otherwise. The prefix of self is
        kept on every yielded address; the walk stops on other's value.
        """
        other = self._checked(other)
        step = 1 if self._value <= other._value else -1
        for value in range(self._value, other._value + step, step):
            yield IPv4Address(value, self._cidr)

    def network_address(self) -> "IPv4Address":
        return IPv4Address(self._value & self.netmask, self._cidr)

    def broadcast_address(self) -> "IPv4Address":
        return IPv4Address((self._value & self.netmask) | (~self.netmask & self.MAX_VALUE), self._cidr)

    def __str__(self) -> str:
        return f"{self.address}/{self._cidr}"

    def __repr__(self) -> str:
        return f"<IPv4Address {self}>"


def network_and_broadcast(ip: IPAddress) -> Tuple[IPAddress, IPAddress]:
    """Return the (network, broadcast) pair of the subnet ip belongs to"""
    return ip.network_address(), ip.broadcast_address()
