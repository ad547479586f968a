"""
Peer Probe - connect-with-timeout liveness check

A probe opens a TCP connection to the candidate and closes it straight away.
Only the boolean outcome is reported.
"""

import logging
import socket
from typing import Optional

from .address import IPAddress


DEFAULT_PROBE_TIMEOUT = 1.0


class PeerProbe:
    """TCP connection attempt used as a presence signal"""

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the probe.

        Args:
            timeout: Connection timeout in seconds
            logger: Logger for per-host outcomes
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def attempt(self, target: IPAddress, port: int, timeout: Optional[float] = None) -> bool:
        """
        Try to connect to target on port.

        Args:
            target: Candidate address
            port: TCP port the peer listens on
            timeout: Overrides the probe timeout for this attempt

        Returns:
            True if the connection was established, False otherwise

        Raises:
            TypeError: target is not an address
            ValueError: port outside [0, 65535] or timeout not positive
        """
        if not isinstance(target, IPAddress):
            raise TypeError(f"target must be an IPAddress, got {type(target).__name__}")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise ValueError(f"port must be an integer in [0, 65535], got {port!r}")
        if timeout is None:
            timeout = self.timeout
        elif timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.logger.debug(f"Trying host: {target}")

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect((target.address, port))
        except OSError as e:
            self.logger.debug(f"Considering host {target} unreachable: {e}")
            return False
        finally:
            sock.close()

        self.logger.debug(f"Considering host {target} reachable")
        return True
