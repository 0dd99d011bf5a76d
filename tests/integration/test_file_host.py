"""
End-to-end tests: a real FileHost on localhost, real TCP clients.
"""

import io
import socket
import threading
import time

import pytest

from filehost import ConfigError, FileHost, HostConfig, ListenEndpoint, RouteTable
from filehost.http.status_codes import SUCCESS_STATUS_LINE


class TestServing:
    """The happy path and the documented failure modes."""

    def test_get_registered_file(self, running_host, hosted_files):
        reply = running_host.get("/a.txt")
        assert reply == SUCCESS_STATUS_LINE + hosted_files["/a.txt"][1]

    def test_get_large_file(self, running_host, hosted_files):
        reply = running_host.get("/big.bin")
        assert reply == SUCCESS_STATUS_LINE + hosted_files["/big.bin"][1]

    def test_no_headers_are_sent(self, running_host, hosted_files):
        reply = running_host.get("/b.txt")
        head, _, body = reply.partition(b"\r\n\r\n")

        assert head == b"HTTP/1.1 200 OK"
        assert body == hosted_files["/b.txt"][1]

    def test_client_without_half_close(self, running_host, hosted_files):
        """Clients that just wait are answered once the read deadline passes."""
        reply = running_host.get("/a.txt", half_close=False)
        assert reply == SUCCESS_STATUS_LINE + hosted_files["/a.txt"][1]

    def test_missing_path(self, running_host):
        reply = running_host.get("/missing.txt")
        assert not reply.startswith(SUCCESS_STATUS_LINE)
        assert reply == b""

    def test_single_token_request(self, running_host):
        reply = running_host.send(b"GET\r\n\r\n")
        assert SUCCESS_STATUS_LINE not in reply

    def test_silent_client_does_not_hang(self, running_host):
        """A client that sends nothing is dropped after the read deadline."""
        start = time.monotonic()
        reply = running_host.send(None, half_close=False)
        elapsed = time.monotonic() - start

        assert reply == b""
        assert elapsed < 2.0

    def test_registered_but_missing_file(self, make_host, routes, tmp_path):
        host = make_host(routes=RouteTable({"/gone": tmp_path / "not-there.txt"}))
        assert host.get("/gone") == b""

    def test_concurrent_requests(self, running_host, hosted_files):
        """Two overlapping connections get their own, non-interleaved bytes."""
        results = {}

        def fetch(path):
            # No half-close: both handlers sit in their read deadline together
            results[path] = running_host.get(path, half_close=False)

        threads = [threading.Thread(target=fetch, args=(p,)) for p in ("/a.txt", "/big.bin")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)

        assert results["/a.txt"] == SUCCESS_STATUS_LINE + hosted_files["/a.txt"][1]
        assert results["/big.bin"] == SUCCESS_STATUS_LINE + hosted_files["/big.bin"][1]

    def test_many_concurrent_requests(self, running_host, hosted_files):
        paths = ["/a.txt", "/b.txt", "/big.bin"] * 5
        results = [None] * len(paths)

        def fetch(i, path):
            results[i] = running_host.get(path)

        threads = [threading.Thread(target=fetch, args=(i, p)) for i, p in enumerate(paths)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)

        for path, reply in zip(paths, results):
            assert reply == SUCCESS_STATUS_LINE + hosted_files[path][1]


class TestErrorResponses:
    """With error_responses on, failures are answered with a status line."""

    @pytest.fixture
    def strict_host(self, make_host):
        return make_host(config=HostConfig(error_responses=True, log_level="WARNING"))

    def test_not_found(self, strict_host):
        assert strict_host.get("/missing.txt") == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_malformed(self, strict_host):
        assert strict_host.send(b"GET\r\n") == b"HTTP/1.1 400 Bad Request\r\n\r\n"


class TestEndpoints:
    """Multiple endpoints are independent."""

    def test_two_endpoints_serve_same_routes(self, routes, config, fetch, hosted_files):
        host = FileHost(routes, [ListenEndpoint("127.0.0.1", 0), ListenEndpoint("127.0.0.1", 0)], config)
        listeners = host.start()
        try:
            assert len(listeners) == 2
            for listener in listeners:
                reply = fetch(listener.address, b"GET /a.txt HTTP/1.1\r\n")
                assert reply == SUCCESS_STATUS_LINE + hosted_files["/a.txt"][1]
        finally:
            host.close()

    def test_bind_failure_only_affects_its_endpoint(self, routes, config, fetch, free_port, caplog):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", free_port))
            blocker.listen(1)

            host = FileHost(
                routes,
                [ListenEndpoint("127.0.0.1", free_port), ListenEndpoint("127.0.0.1", 0)],
                config,
            )
            listeners = host.start()
            try:
                assert len(listeners) == 1
                assert "already in use" in caplog.text

                reply = fetch(listeners[0].address, b"GET /a.txt HTTP/1.1\r\n")
                assert reply.startswith(SUCCESS_STATUS_LINE)
            finally:
                host.close()


class TestLifecycle:
    """Startup output and the ENTER-to-quit loop."""

    def test_run_until_enter(self, routes, config, capsys):
        host = FileHost(routes, [ListenEndpoint("127.0.0.1", 0)], config)
        host.run(stdin=io.StringIO("\n"))

        out = capsys.readouterr().out
        assert out.startswith("Hosting:\n")
        assert "  as  /a.txt" in out
        assert "\nOn:\n    127.0.0.1:0\n" in out
        assert "Press [ENTER] to close server." in out
        assert host.listeners == []  # closed on exit

    def test_invalid_config_fails_fast(self, routes):
        with pytest.raises(ConfigError):
            FileHost(routes, [ListenEndpoint("127.0.0.1", 0)], HostConfig(read_timeout=0))
