#!/usr/bin/env python3
"""
Tests for the network manager facade
"""

import unittest
from unittest.mock import MagicMock

from peer_discovery.core.config import DiscoveryConfig
from peer_discovery.core.exceptions import NoActiveInterfaces, NoAddressMatchesFilter
from peer_discovery.discovery_client import PeerDiscoveryClient, create_discovery_client, prefix_filter
from peer_discovery.discovery_components.address import IPv4Address


def ip(text, cidr=16):
    return IPv4Address.parse(text, cidr)


def reader_with(*addresses):
    reader = MagicMock()
    reader.network_interfaces.return_value = list(addresses)
    return reader


def failing_reader():
    reader = MagicMock()
    reader.network_interfaces.side_effect = NoActiveInterfaces("There were no active network interfaces detected.")
    return reader


class TestHostAddresses(unittest.TestCase):
    """Interface lookup with and without a filter"""

    def test_all_addresses_without_filter(self):
        client = PeerDiscoveryClient(interface_reader=reader_with(ip("192.168.123.123"), ip("200.200.200.200")))
        self.assertEqual(client.get_host_addresses(), [ip("192.168.123.123"), ip("200.200.200.200")])

    def test_prefix_filter_selects_matching(self):
        client = PeerDiscoveryClient(interface_reader=reader_with(ip("192.168.123.123"), ip("200.200.200.200")))
        self.assertEqual(client.get_host_addresses_which(prefix_filter("192")), [ip("192.168.123.123")])

    def test_more_than_one_match(self):
        client = PeerDiscoveryClient(
            interface_reader=reader_with(ip("192.168.1.1"), ip("192.168.1.2"), ip("200.200.200.200"))
        )
        self.assertEqual(client.get_host_addresses_which(prefix_filter("192")), [ip("192.168.1.1"), ip("192.168.1.2")])

    def test_single_interface(self):
        client = PeerDiscoveryClient(interface_reader=reader_with(ip("192.168.123.123")))
        self.assertEqual(client.get_host_addresses(), [ip("192.168.123.123")])
        self.assertEqual(client.get_host_addresses_which(prefix_filter("192")), [ip("192.168.123.123")])

    def test_no_match_raises(self):
        client = PeerDiscoveryClient(interface_reader=reader_with(ip("192.168.1.1"), ip("192.168.1.2")))
        with self.assertRaises(NoAddressMatchesFilter) as ctx:
            client.get_host_addresses_which(prefix_filter("200"))
        self.assertEqual(str(ctx.exception), "None of the available addresses match the filter supplied.")

    def test_no_interfaces_raises_with_or_without_filter(self):
        client = PeerDiscoveryClient(interface_reader=failing_reader())
        with self.assertRaises(NoActiveInterfaces):
            client.get_host_addresses()
        with self.assertRaises(NoActiveInterfaces):
            client.get_host_addresses_which(prefix_filter("192"))


class TestAdjacentPeers(unittest.TestCase):
    """Peer scan through the facade"""

    def setUp(self):
        self.coordinator = MagicMock()
        self.coordinator.find_peers.return_value = {ip("10.0.0.2", 24)}

    def test_scans_host_interfaces(self):
        client = PeerDiscoveryClient(coordinator=self.coordinator,
                                     interface_reader=reader_with(ip("10.0.0.1", 24)))

        self.assertEqual(client.get_adjacent_peers(2552), {ip("10.0.0.2", 24)})
        self.coordinator.find_peers.assert_called_once_with([ip("10.0.0.1", 24)], 2552)

    def test_filter_applied_before_scan(self):
        client = PeerDiscoveryClient(coordinator=self.coordinator,
                                     interface_reader=reader_with(ip("10.0.0.1", 24), ip("172.17.0.1", 16)))

        client.get_adjacent_peers(2552, prefix_filter("10."))
        self.coordinator.find_peers.assert_called_once_with([ip("10.0.0.1", 24)], 2552)

    def test_filter_without_match_skips_scan(self):
        client = PeerDiscoveryClient(coordinator=self.coordinator,
                                     interface_reader=reader_with(ip("172.17.0.1", 16)))

        with self.assertRaises(NoAddressMatchesFilter):
            client.get_adjacent_peers(2552, prefix_filter("10."))
        self.coordinator.find_peers.assert_not_called()

    def test_explicit_interfaces_bypass_reader(self):
        reader = reader_with()
        client = PeerDiscoveryClient(coordinator=self.coordinator, interface_reader=reader)

        client.get_adjacent_peers(2552, local_interfaces=[ip("10.0.0.1", 24)])
        reader.network_interfaces.assert_not_called()

    def test_explicit_empty_interfaces_raise(self):
        client = PeerDiscoveryClient(coordinator=self.coordinator, interface_reader=reader_with())
        with self.assertRaises(NoActiveInterfaces):
            client.get_adjacent_peers(2552, local_interfaces=[])


class TestListenForJoiners(unittest.TestCase):

    def test_uses_listener_factory(self):
        factory = MagicMock()
        client = PeerDiscoveryClient(interface_reader=reader_with(), listener_factory=factory, listen_host="127.0.0.1")

        server = client.listen_for_joiners(2552)

        self.assertIs(server, factory.return_value)
        factory.assert_called_once_with(2552, host="127.0.0.1", logger=client.logger)


class TestCreateDiscoveryClient(unittest.TestCase):

    def test_wired_from_config(self):
        config = DiscoveryConfig(timeout=0.25, max_workers=8, deadline=12.0, listen_host="0.0.0.0")
        client = create_discovery_client(config)

        self.assertEqual(client.coordinator.probe.timeout, 0.25)
        self.assertEqual(client.coordinator.max_workers, 8)
        self.assertEqual(client.coordinator.deadline, 12.0)
        self.assertEqual(client.listen_host, "0.0.0.0")
        self.assertIs(client.coordinator.logger, client.logger)


if __name__ == "__main__":
    unittest.main(verbosity=2)
