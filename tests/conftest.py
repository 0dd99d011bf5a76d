"""
pytest configuration and fixtures.
"""

import socket
from pathlib import Path
from typing import Generator, Optional, Tuple

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from filehost import FileHost, HostConfig, ListenEndpoint, RouteTable


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def hosted_files(tmp_path: Path) -> dict:
    """Two small files and one large one, keyed by virtual path."""
    files = {
        "/a.txt": (tmp_path / "a.txt", b"alpha contents\n"),
        "/b.txt": (tmp_path / "b.txt", b"bravo " * 10),
        "/big.bin": (tmp_path / "big.bin", bytes(range(256)) * 64),  # 16 KiB
    }
    for path, content in files.values():
        path.write_bytes(content)
    return files


@pytest.fixture
def routes(hosted_files: dict) -> RouteTable:
    return RouteTable({virtual: path for virtual, (path, _) in hosted_files.items()})


@pytest.fixture
def config() -> HostConfig:
    """Default test configuration."""
    return HostConfig(log_level="WARNING")


def request(
    address: Tuple[str, int],
    payload: Optional[bytes],
    half_close: bool = True,
    timeout: float = 5.0,
) -> bytes:
    """
    Send `payload` to the host and return everything it sends back.

    With half_close the client signals end-of-request right away, so the
    server does not have to wait out the read deadline.
    """
    with socket.create_connection(address, timeout=timeout) as s:
        if payload:
            s.sendall(payload)
        if half_close:
            s.shutdown(socket.SHUT_WR)

        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)


class RunningHost:
    """A FileHost bound to an OS-assigned port on localhost."""

    def __init__(self, host: FileHost):
        self.host = host

    @property
    def address(self) -> Tuple[str, int]:
        return self.host.listeners[0].address

    def get(self, path: str, **kwargs) -> bytes:
        return request(self.address, f"GET {path} HTTP/1.1\r\n\r\n".encode(), **kwargs)

    def send(self, payload: Optional[bytes], **kwargs) -> bytes:
        return request(self.address, payload, **kwargs)


@pytest.fixture
def make_host(routes: RouteTable, config: HostConfig):
    """Factory that starts hosts and closes them after the test."""
    started = []

    def factory(routes: RouteTable = routes, config: HostConfig = config) -> RunningHost:
        host = FileHost(routes, [ListenEndpoint("127.0.0.1", 0)], config)
        host.start()
        started.append(host)
        return RunningHost(host)

    yield factory

    for host in started:
        host.close()


@pytest.fixture
def running_host(make_host) -> Generator[RunningHost, None, None]:
    """A host serving the `routes` fixture with default configuration."""
    yield make_host()


@pytest.fixture
def fetch():
    """The raw `request(address, payload, ...)` client helper."""
    return request
