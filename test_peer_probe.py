#!/usr/bin/env python3
"""
Tests for the connect-with-timeout probe
"""

import socket
import unittest
from unittest.mock import patch, MagicMock

from peer_discovery.discovery_components.address import IPv4Address
from peer_discovery.discovery_components.listener import ListenerServer
from peer_discovery.discovery_components.peer_probe import PeerProbe, DEFAULT_PROBE_TIMEOUT


class TestPeerProbe(unittest.TestCase):
    """Test the PeerProbe class"""

    def setUp(self):
        """Set up test fixtures"""
        self.probe = PeerProbe(timeout=0.5)
        self.target = IPv4Address.parse("127.0.0.1", 8)

    def test_default_timeout_is_one_second(self):
        self.assertEqual(PeerProbe().timeout, DEFAULT_PROBE_TIMEOUT)
        self.assertEqual(DEFAULT_PROBE_TIMEOUT, 1.0)

    def test_non_positive_timeout_rejected(self):
        with self.assertRaises(ValueError):
            PeerProbe(timeout=0)

    @patch('socket.socket')
    def test_reachable_host(self, mock_socket):
        """Test probe with a listening peer"""
        mock_sock = MagicMock()
        mock_socket.return_value = mock_sock

        self.assertTrue(self.probe.attempt(self.target, 2552))
        mock_sock.settimeout.assert_called_once_with(0.5)
        mock_sock.connect.assert_called_once_with(("127.0.0.1", 2552))
        mock_sock.close.assert_called_once()

    @patch('socket.socket')
    def test_refused_connection(self, mock_socket):
        """Test probe when nobody listens"""
        mock_sock = MagicMock()
        mock_sock.connect.side_effect = ConnectionRefusedError()
        mock_socket.return_value = mock_sock

        self.assertFalse(self.probe.attempt(self.target, 2552))
        mock_sock.close.assert_called_once()

    @patch('socket.socket')
    def test_timeout(self, mock_socket):
        """Test probe when the host never answers"""
        mock_sock = MagicMock()
        mock_sock.connect.side_effect = socket.timeout("timed out")
        mock_socket.return_value = mock_sock

        self.assertFalse(self.probe.attempt(self.target, 2552))
        mock_sock.close.assert_called_once()

    @patch('socket.socket')
    def test_unreachable_network(self, mock_socket):
        mock_sock = MagicMock()
        mock_sock.connect.side_effect = OSError(101, "Network is unreachable")
        mock_socket.return_value = mock_sock

        self.assertFalse(self.probe.attempt(self.target, 2552))
        mock_sock.close.assert_called_once()

    @patch('socket.socket')
    def test_per_attempt_timeout_override(self, mock_socket):
        mock_sock = MagicMock()
        mock_socket.return_value = mock_sock

        self.probe.attempt(self.target, 2552, timeout=0.1)
        mock_sock.settimeout.assert_called_once_with(0.1)

    @patch('socket.socket')
    def test_non_positive_attempt_timeout_raises(self, mock_socket):
        for timeout in (0, 0.0, -1):
            with self.subTest(timeout=timeout):
                with self.assertRaises(ValueError):
                    self.probe.attempt(self.target, 2552, timeout=timeout)
        mock_socket.assert_not_called()

    def test_invalid_port_raises(self):
        for port in (-1, 65536, "80", True):
            with self.subTest(port=port):
                with self.assertRaises(ValueError):
                    self.probe.attempt(self.target, port)

    def test_invalid_target_raises(self):
        with self.assertRaises(TypeError):
            self.probe.attempt("127.0.0.1", 2552)


class TestPeerProbeLoopback(unittest.TestCase):
    """Probe against real loopback sockets"""

    def test_listening_port_is_reachable(self):
        with ListenerServer(0, host="127.0.0.1") as server:
            port = server.address[1]
            self.assertTrue(PeerProbe(timeout=1.0).attempt(IPv4Address.parse("127.0.0.1", 8), port))

    def test_closed_port_is_unreachable(self):
        # Bind then release to get a port nobody listens on
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]

        self.assertFalse(PeerProbe(timeout=1.0).attempt(IPv4Address.parse("127.0.0.1", 8), port))


if __name__ == "__main__":
    unittest.main(verbosity=2)
