import signal
import threading
import urllib.request

import pytest

from linkshort.server import Server, parse_address, start


def _hello(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"hello"]


def test_parse_address_empty_host_means_all_interfaces():
    assert parse_address(":8080") == ("0.0.0.0", 8080)


def test_parse_address_named_host():
    assert parse_address("localhost:9000") == ("localhost", 9000)


def test_parse_address_bracketed_ipv6():
    assert parse_address("[::1]:80") == ("::1", 80)


@pytest.mark.parametrize("addr", ["8080", "host:", "host:abc", "a:b:1", "host:70000"])
def test_parse_address_rejects_bad_addresses(addr):
    with pytest.raises(ValueError):
        parse_address(addr)


def test_server_serves_requests_until_shutdown():
    server = Server(_hello, "127.0.0.1:0")
    worker = threading.Thread(target=server.serve_forever, daemon=True)
    worker.start()
    try:
        with urllib.request.urlopen(f"http://127.0.0.1:{server.port}/", timeout=5) as resp:
            body = resp.read()
            status = resp.status
    finally:
        server.shutdown()
    worker.join(5)
    assert status == 200
    assert body == b"hello"
    assert not worker.is_alive()


def test_shutdown_without_serving_returns():
    server = Server(_hello, "127.0.0.1:0")
    closer = threading.Thread(target=server.shutdown, daemon=True)
    closer.start()
    closer.join(5)
    assert not closer.is_alive()


def test_start_runs_cleanup_after_sigterm(capsys):
    calls = []
    previous = signal.getsignal(signal.SIGTERM)
    timer = threading.Timer(0.3, signal.raise_signal, args=(signal.SIGTERM,))
    timer.start()
    start(_hello, "127.0.0.1:0", lambda: calls.append("done"))
    timer.join()
    out = capsys.readouterr().out
    assert calls == ["done"]
    assert "Server running at http://localhost127.0.0.1:0" in out
    assert "Server stopped gracefully" in out
    assert signal.getsignal(signal.SIGTERM) == previous


def test_start_runs_cleanup_when_address_is_bad():
    calls = []
    with pytest.raises(ValueError):
        start(_hello, "no-port", lambda: calls.append("done"))
    assert calls == ["done"]


def test_start_stops_on_sigint(capsys):
    timer = threading.Timer(0.3, signal.raise_signal, args=(signal.SIGINT,))
    timer.start()
    start(_hello, "127.0.0.1:0", None)
    timer.join()
    out = capsys.readouterr().out
    assert "Shutting down server..." in out
    assert signal.getsignal(signal.SIGINT) is signal.default_int_handler