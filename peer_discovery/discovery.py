"""
Peer Discovery - subnet scan for nodes listening on a port

Derives the usable host ranges of the local interfaces, probes every
candidate concurrently and returns the addresses that answered.
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor, FIRST_COMPLETED, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Set

from .core.exceptions import NoPeersFound
from .discovery_components.address import IPAddress
from .discovery_components.peer_probe import PeerProbe
from .discovery_components.subnet_ranges import SubnetRange, derive_usable_ranges


DEFAULT_MAX_WORKERS = 64


@dataclass
class ScanStats:
    """Counters for the last discovery pass"""
    ranges: int = 0
    probed: int = 0
    reachable: int = 0
    skipped: int = 0
    deadline_hit: bool = False
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ranges": self.ranges,
            "probed": self.probed,
            "reachable": self.reachable,
            "skipped": self.skipped,
            "deadline_hit": self.deadline_hit,
            "duration_seconds": self.duration_seconds,
        }


class DiscoveryCoordinator:
    """Runs one scan pass over the subnets of the given interfaces"""

    def __init__(self, probe: Optional[PeerProbe] = None,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 deadline: Optional[float] = None,
                 logger: Optional[logging.Logger] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the coordinator.

        Args:
            probe: Probe used for every candidate
            max_workers: Upper bound on concurrent connection attempts
            deadline: Optional limit in seconds for the whole pass
            logger: Logger for scan progress
            clock: Monotonic time source
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.logger = logger or logging.getLogger(__name__)
        self.probe = probe or PeerProbe(logger=self.logger)
        self.max_workers = max_workers
        self.deadline = deadline
        self.clock = clock
        self.last_stats = ScanStats()

    def find_peers(self, local_interfaces: Iterable[IPAddress], port: int) -> Set[IPAddress]:
        """
        Find every host on the local subnets that accepts a connection on port.

        Args:
            local_interfaces: Interface addresses with prefix lengths
            port: Port peers listen on

        Returns:
            Set of reachable addresses

        Raises:
            NoPeersFound: the scan finished and nobody answered
        """
        started = self.clock()
        stats = ScanStats()
        self.last_stats = stats

        ranges = derive_usable_ranges(local_interfaces, logger=self.logger)
        stats.ranges = len(ranges)
        self.logger.info(
            f"Scanning {len(ranges)} subnet range(s) on port {port}: "
            f"{', '.join(str(r) for r in ranges) or 'none'}"
        )

        peers = self._probe_all(self._candidates(ranges), port, started, stats)

        stats.reachable = len(peers)
        stats.duration_seconds = round(self.clock() - started, 2)
        self.logger.info(
            f"Scan finished in {stats.duration_seconds}s: {stats.probed} probed, "
            f"{stats.reachable} reachable"
        )

        if not peers:
            raise NoPeersFound("There were no peers found on the network")

        self.logger.info(f"Marking {[str(p) for p in sorted(peers)]} as peers on the network")
        return peers

    def _candidates(self, ranges: List[SubnetRange]) -> Iterator[IPAddress]:
        for subnet in ranges:
            yield from subnet.hosts()

    def _deadline_passed(self, started: float) -> bool:
        return self.deadline is not None and self.clock() - started >= self.deadline

    def _remaining(self, started: float) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - (self.clock() - started))

    def _probe_all(self, candidates: Iterator[IPAddress], port: int,
                   started: float, stats: ScanStats) -> Set[IPAddress]:
        """
        Probe candidates on a bounded pool.

        At most max_workers * 2 probes are queued at once so the candidate
        stream is never materialized. Results are merged here, on the
        submitting thread only.
        """
        peers: Set[IPAddress] = set()
        window = self.max_workers * 2

        with ThreadPoolExecutor(max_workers=self.max_workers,
                                thread_name_prefix="peer-probe") as executor:
            in_flight = {}

            for candidate in candidates:
                if self._deadline_passed(started):
                    stats.deadline_hit = True
                    self.logger.warning(
                        f"Discovery deadline of {self.deadline}s reached, no further hosts will be probed"
                    )
                    break
                if len(in_flight) >= window:
                    done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                    self._collect(done, in_flight, peers, stats)
                in_flight[executor.submit(self.probe.attempt, candidate, port)] = candidate

            done, not_done = wait(in_flight, timeout=self._remaining(started))
            self._collect(done, in_flight, peers, stats)

            for future in not_done:
                if future.cancel():
                    stats.skipped += 1
            if not_done:
                stats.deadline_hit = True
                done, _ = wait(f for f in not_done if not f.cancelled())
                self._collect(done, in_flight, peers, stats)

        return peers

    def _collect(self, done, in_flight: Dict, peers: Set[IPAddress], stats: ScanStats):
        for future in done:
            candidate = in_flight.pop(future)
            stats.probed += 1
            if future.result():
                peers.add(candidate)


def find_peers(port: int, local_interfaces: Optional[Iterable[IPAddress]] = None,
               timeout: float = 1.0, max_workers: int = DEFAULT_MAX_WORKERS,
               deadline: Optional[float] = None,
               interface_filter: Optional[Callable[[IPAddress], bool]] = None) -> Dict[str, Any]:
    """
    Convenience function for a single discovery pass.

    Args:
        port: Port peers listen on
        local_interfaces: Interface addresses; read from the host when omitted
        timeout: Per-probe timeout in seconds
        max_workers: Concurrent probes
        deadline: Optional limit in seconds for the whole pass
        interface_filter: Optional predicate applied to the interface addresses

    Returns:
        Dictionary with the peer list and scan counters

    Raises:
        NoActiveInterfaces: no interface addresses to scan
        NoAddressMatchesFilter: interface_filter rejected every address
        NoPeersFound: the scan finished and nobody answered

    Unlike the CLI, outcomes without peers are raised rather than folded
    into the returned dictionary.
    """
    from .discovery_client import PeerDiscoveryClient

    logger = logging.getLogger(__name__)
    logger.debug(f"find_peers called for port {port} with timeout={timeout}, workers={max_workers}")

    coordinator = DiscoveryCoordinator(
        probe=PeerProbe(timeout=timeout, logger=logger),
        max_workers=max_workers,
        deadline=deadline,
        logger=logger,
    )
    client = PeerDiscoveryClient(coordinator=coordinator, logger=logger)
    peers = client.get_adjacent_peers(port, interface_filter, local_interfaces=local_interfaces)

    return {
        "peers": [str(p) for p in sorted(peers)],
        "port": port,
        "meta": coordinator.last_stats.to_dict(),
    }
