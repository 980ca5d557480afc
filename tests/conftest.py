"""Pytest fixtures: start/stop a node subprocess driven over stdin/stdout."""

import sys
from pathlib import Path

import pytest

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from client import NodeClient
from maelstrom_node import Memory


@pytest.fixture
def memory():
    return Memory()


@pytest.fixture
def node():
    """Node subprocess; closed (stdin EOF) after the test."""
    client = NodeClient(node_id="n1", client_id="c1", timeout=5.0)
    yield client
    client.close()
