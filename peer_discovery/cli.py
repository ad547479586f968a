#!/usr/bin/env python3
"""
Peer Discovery CLI

Scan the local subnets for peers, list interface addresses, or run the
presence beacon.
"""

import argparse
import json
import sys
import logging
from typing import Any, Dict, Optional

from .core.config import DiscoveryConfig, load_config
from .core.exceptions import (
    ConfigError,
    NoActiveInterfaces,
    NoAddressMatchesFilter,
    NoPeersFound,
    PeerDiscoveryError,
)
from .core.logging import setup_logging
from .discovery_client import PeerDiscoveryClient, create_discovery_client, prefix_filter

# Configure logger for CLI
logger = logging.getLogger(__name__)


def discover_peers(config: DiscoveryConfig, client: Optional[PeerDiscoveryClient] = None) -> Dict[str, Any]:
    """Run one discovery pass - returns data array or error"""

    logger.info(f"CLI discovery started on port {config.port}")
    client = client or create_discovery_client(config)
    predicate = prefix_filter(config.interface_prefix) if config.interface_prefix else None
    meta: Dict[str, Any] = {"port": config.port}

    try:
        peers = client.get_adjacent_peers(config.port, predicate)
    except NoPeersFound as e:
        logger.info(f"CLI discovery found no peers: {e}")
        meta.update(client.coordinator.last_stats.to_dict())
        return {"data": [], "error": None, "meta": meta, "result_type": "no_peers"}
    except (NoActiveInterfaces, NoAddressMatchesFilter) as e:
        logger.error(f"CLI discovery has nothing to scan: {e}")
        return {"data": [], "error": str(e), "meta": meta, "result_type": "error"}

    meta.update(client.coordinator.last_stats.to_dict())
    logger.info(f"CLI discovery completed, found {len(peers)} peers")
    return {
        "data": [{"ip": p.address, "cidr": p.cidr} for p in sorted(peers)],
        "error": None,
        "meta": meta,
        "result_type": "success",
    }


def list_interfaces(config: DiscoveryConfig, client: Optional[PeerDiscoveryClient] = None) -> Dict[str, Any]:
    """Interface addresses on this host, optionally filtered by prefix"""
    client = client or create_discovery_client(config)
    try:
        if config.interface_prefix:
            addresses = client.get_host_addresses_which(prefix_filter(config.interface_prefix))
        else:
            addresses = client.get_host_addresses()
    except (NoActiveInterfaces, NoAddressMatchesFilter) as e:
        return {"data": [], "error": str(e), "result_type": "error"}

    return {
        "data": [{"ip": a.address, "cidr": a.cidr} for a in addresses],
        "error": None,
        "result_type": "success",
    }


def run_listener(config: DiscoveryConfig, client: Optional[PeerDiscoveryClient] = None):
    """Run the presence beacon until interrupted"""
    client = client or create_discovery_client(config)
    server = client.listen_for_joiners(config.port)
    try:
        server.wait()
    except KeyboardInterrupt:
        logger.info("Listener interrupted by user")
    finally:
        server.stop()


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--config',
        help='YAML configuration file'
    )
    parser.add_argument(
        '--port',
        type=int,
        help='Discovery port (default: 2552)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='peer-discovery',
        description="Peer Discovery - find nodes listening on the local subnets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan every local subnet for peers on the default port
  peer-discovery discover

  # Only scan the subnets of 192.168.* interfaces, port 9000
  peer-discovery discover --port 9000 --prefix 192.168

  # Bound the whole scan to 30 seconds
  peer-discovery discover --deadline 30

  # Announce this node to scanning peers
  peer-discovery listen --port 9000
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    discover_parser = subparsers.add_parser('discover', help='Scan local subnets for peers')
    _add_common_arguments(discover_parser)
    discover_parser.add_argument(
        '--timeout',
        type=float,
        help='Per-host connection timeout in seconds (default: 1.0)'
    )
    discover_parser.add_argument(
        '--workers',
        type=int,
        help='Concurrent connection attempts (default: 64)'
    )
    discover_parser.add_argument(
        '--deadline',
        type=float,
        help='Stop probing new hosts after this many seconds'
    )
    discover_parser.add_argument(
        '--prefix',
        help='Only use interfaces whose address starts with this prefix (e.g. 192.168)'
    )

    interfaces_parser = subparsers.add_parser('interfaces', help='List interface addresses on this host')
    _add_common_arguments(interfaces_parser)
    interfaces_parser.add_argument(
        '--prefix',
        help='Only list addresses starting with this prefix'
    )

    listen_parser = subparsers.add_parser('listen', help='Accept connections so peers can find this node')
    _add_common_arguments(listen_parser)
    listen_parser.add_argument(
        '--host',
        help='Address to bind (default: all interfaces)'
    )

    return parser


def _resolve_config(args: argparse.Namespace) -> DiscoveryConfig:
    config = load_config(args.config)
    return config.with_overrides(
        port=args.port,
        timeout=getattr(args, 'timeout', None),
        max_workers=getattr(args, 'workers', None),
        deadline=getattr(args, 'deadline', None),
        interface_prefix=getattr(args, 'prefix', None),
        listen_host=getattr(args, 'host', None),
    )


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = _resolve_config(args)
    except ConfigError as e:
        print(json.dumps({"data": [], "error": str(e), "result_type": "error"}), file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_level, debug=args.verbose)
    if args.verbose:
        logger.info("Verbose logging enabled")

    try:
        if args.command == 'listen':
            run_listener(config)
            sys.exit(0)

        if args.command == 'interfaces':
            result = list_interfaces(config)
        else:
            result = discover_peers(config)

        print(json.dumps(result))

        if result.get("result_type") == "error":
            logger.error(f"CLI {args.command} failed with error: {result['error']}")
            sys.exit(1)
        sys.exit(0)

    except KeyboardInterrupt:
        print(json.dumps({
            "data": [],
            "error": "Discovery cancelled by user",
            "result_type": "error"
        }), file=sys.stderr)
        sys.exit(1)
    except (PeerDiscoveryError, OSError) as e:
        logger.error(f"CLI {args.command} failed with exception: {e}")
        print(json.dumps({
            "data": [],
            "error": str(e),
            "result_type": "error"
        }), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
