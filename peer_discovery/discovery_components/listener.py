"""
Listener - presence beacon for joining nodes

Accepts inbound TCP connections on the discovery port and closes each one
immediately. A successful connect is all a probing peer needs to mark this
node as present.
"""

import logging
import socket
import threading
from typing import Optional, Tuple


ACCEPT_POLL_INTERVAL = 0.5


class ListenerServer:
    """Background accept-and-close server"""

    def __init__(self, port: int, host: str = "", backlog: int = 64,
                 logger: Optional[logging.Logger] = None):
        self.host = host
        self.port = port
        self.backlog = backlog
        self.logger = logger or logging.getLogger(__name__)
        self.joiners_seen = 0
        self._server: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the port is the real one when 0 was requested"""
        if self._server is None:
            return self.host, self.port
        return self._server.getsockname()[:2]

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "ListenerServer":
        """Bind the server socket and start the accept loop"""
        if self.running:
            return self

        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server.bind((self.host, self.port))
            server.listen(self.backlog)
            server.settimeout(ACCEPT_POLL_INTERVAL)
        except OSError:
            server.close()
            raise

        self._server = server
        self._stopping.clear()
        self._thread = threading.Thread(
            target=self._accept_joiners, name=f"peer-listener-{self.port}", daemon=True
        )
        self._thread.start()
        self.logger.info(f"Listening for joiners on {self.address[0] or '0.0.0.0'}:{self.address[1]}")
        return self

    def _accept_joiners(self):
        server = self._server
        while not self._stopping.is_set():
            try:
                joiner, remote = server.accept()
            except socket.timeout:
                continue
            except OSError:
                # Socket closed during shutdown
                break
            joiner.close()
            self.joiners_seen += 1
            self.logger.info(f"Listener pinged by {remote[0]}:{remote[1]}")

    def stop(self, timeout: Optional[float] = None):
        """Stop accepting and release the port"""
        self._stopping.set()
        if self._thread is not None:
            self._thread.join(timeout if timeout is not None else ACCEPT_POLL_INTERVAL * 4)
        if self._server is not None:
            self._server.close()
        self._thread = None
        self._server = None
        self.logger.info(f"Listener on port {self.port} stopped")

    def wait(self):
        """Block until the accept loop ends"""
        if self._thread is not None:
            self._thread.join()

    def __enter__(self) -> "ListenerServer":
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()


def start_listener(port: int, host: str = "",
                   logger: Optional[logging.Logger] = None) -> ListenerServer:
    """Start a presence beacon on port and return the running server"""
    return ListenerServer(port, host=host, logger=logger).start()
