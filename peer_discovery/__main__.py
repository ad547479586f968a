"""
Entry point for Peer Discovery CLI when run as a module.

This allows the package to be run with:
python -m peer_discovery
"""

from .cli import main

if __name__ == "__main__":
    main()
