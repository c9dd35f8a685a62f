"""Pytest fixtures for portwatch tests."""

import socket
import sys
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for portwatch imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _free_port() -> int:
    """A port that was free a moment ago (bind to 0, read it back, close)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def closed_port() -> int:
    return _free_port()


@pytest.fixture
def listening_port():
    """Port with an active listener on 127.0.0.1 for the duration of the test."""
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(16)
    try:
        yield srv.getsockname()[1]
    finally:
        srv.close()


@pytest.fixture
def raw_config() -> dict:
    """Minimal valid config in the on-disk shape."""
    return {
        "server": {
            "port": "3000",
            "url": "status",
            "headerSecrete": "X-Secret",
            "secrete": "s3cret",
        },
        "ports": {"80": "http", "9999": "nothing"},
    }


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a dict (or raw text) to tmp_path/config.yaml and return the path."""

    def _write(content, name: str = "config.yaml") -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(content), encoding="utf-8")
        return path

    return _write
