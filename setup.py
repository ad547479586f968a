"""
Setup script for Peer Discovery - subnet scanning for cluster peers
"""

from setuptools import setup, find_packages

# Read requirements from requirements.txt
def read_requirements():
    try:
        with open('requirements.txt', 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    except FileNotFoundError:
        return []

setup(
    name="peer-discovery",
    version="0.1.0",
    description="Peer Discovery - find cluster nodes listening on the local subnets",
    long_description="A small library that scans the subnets of a host's IPv4 interfaces for peers accepting connections on a port.",
    packages=find_packages(include=['peer_discovery', 'peer_discovery.*']),
    install_requires=read_requirements(),
    extras_require={
        "dev": [
            "pytest>=6.0",
            "black>=21.0",
            "flake8>=3.8",
        ],
    },
    entry_points={
        'console_scripts': [
            'peer-discovery=peer_discovery.cli:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
)
