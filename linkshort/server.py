"""Running the WSGI app over HTTP with a graceful shutdown on SIGINT or SIGTERM."""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.serving import make_server

from .logs import get_logger

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]

SHUTDOWN_TIMEOUT = 10.0
_POLL_INTERVAL = 0.2


def parse_address(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` address; an empty host means every interface."""
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {addr!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"too many colons in address {addr!r}")
    if not (port_text.isascii() and port_text.isdigit()):
        raise ValueError(f"invalid port in address {addr!r}")
    port = int(port_text)
    if port > 65535:
        raise ValueError(f"port out of range in address {addr!r}")
    return host or "0.0.0.0", port


class Server:
    """A threaded HTTP server bound to ``addr`` serving a WSGI app."""

    def __init__(self, app: WSGIApp, addr: str) -> None:
        host, port = parse_address(addr)
        self._server = make_server(host, port, app, threaded=True)
        self._serving = threading.Event()
        self._closed = False

    @property
    def port(self) -> int:
        """The port the server is bound to."""
        return self._server.server_port

    def serve_forever(self) -> None:
        """Handle requests until :meth:`shutdown` is called."""
        self._serving.set()
        self._server.serve_forever()

    def shutdown(self) -> None:
        """Stop serving and release the socket."""
        if self._closed:
            return
        self._closed = True
        if self._serving.is_set():
            self._server.shutdown()
        self._server.server_close()


def _wait_for_signal(worker: threading.Thread) -> None:
    """Block until SIGINT or SIGTERM arrives, or until the worker ends."""
    if threading.current_thread() is not threading.main_thread():
        # Signal handlers can only be installed from the main thread.
        worker.join()
        return

    stop = threading.Event()

    def handle(signum: int, frame: Any) -> None:
        stop.set()

    previous = {sig: signal.signal(sig, handle) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        while not stop.wait(_POLL_INTERVAL):
            if not worker.is_alive():
                break
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)


def start(
    app: WSGIApp,
    addr: str,
    cleanup: Callable[[], None] | None = None,
) -> None:
    """Serve ``app`` on ``addr`` until SIGINT or SIGTERM arrives, then clean up."""
    try:
        server = Server(app, addr)
        worker = threading.Thread(target=server.serve_forever, daemon=True)
        print(f"🚀 Server running at http://localhost{addr}")
        worker.start()

        _wait_for_signal(worker)

        print("\n🛑 Shutting down server...")
        try:
            server.shutdown()
        except OSError as exc:
            get_logger().error("Server Shutdown Failed:%s", exc)
        worker.join(SHUTDOWN_TIMEOUT)
        print("✅ Server stopped gracefully")
    finally:
        if cleanup is not None:
            cleanup()