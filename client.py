"""Driver for a responder node running as a subprocess over stdin/stdout."""

import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Optional

from protocol import (
    Body,
    Broadcast,
    Echo,
    Envelope,
    Generate,
    Init,
    ParseError,
    Read,
    Topology,
    parse,
    serialize,
)

ROOT = Path(__file__).resolve().parent


class NodeClient:
    """Talks to one node. Methods: Init(), Echo(text), Generate(), Broadcast(value), Read(), Topology(topology)."""

    def __init__(self, node_id: str = "n1", client_id: str = "c1", timeout: float = 5.0, extra_args: Optional[list[str]] = None):
        self._node_id = node_id
        self._client_id = client_id
        self._timeout = timeout
        self._next_msg_id = 1
        self._stderr: Optional[str] = None
        env = os.environ.copy()
        env["PYTHONPATH"] = str(ROOT)
        self._proc = subprocess.Popen(
            [sys.executable, "-m", "server", *(extra_args or [])],
            cwd=str(ROOT),
            env=env,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
        )

    def __enter__(self) -> "NodeClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def send_line(self, line: str) -> None:
        """Write one raw line to the node, no reply expected."""
        if self._proc.poll() is not None:
            raise RuntimeError("node is not running")
        self._proc.stdin.write(line + "\n")
        self._proc.stdin.flush()

    def request(self, body: Body) -> Envelope:
        """Send body with a fresh msg_id and return the decoded reply."""
        if body.msg_id is None:
            body.msg_id = self._next_msg_id
            self._next_msg_id += 1
        self.send_line(serialize(Envelope(src=self._client_id, dest=self._node_id, body=body)))
        line = self._proc.stdout.readline()
        if not line:
            raise RuntimeError("node closed its output")
        try:
            return parse(line.strip())
        except ParseError as e:
            raise RuntimeError(f"bad reply from node: {e}") from e

    def _expect(self, body: Body, reply_type: str) -> Envelope:
        reply = self.request(body)
        if reply.body.type != reply_type:
            raise RuntimeError(f"expected {reply_type}, got {reply.body.type}")
        return reply

    def Init(self) -> None:
        self._expect(Init(), "init_ok")

    def Echo(self, text: str) -> str:
        """Echo text through the node and return what came back."""
        return self._expect(Echo(echo=text), "echo_ok").body.echo

    def Generate(self) -> str:
        """Ask the node for a new unique id."""
        return self._expect(Generate(), "generate_ok").body.id

    def Broadcast(self, value: int) -> None:
        self._expect(Broadcast(message=value), "broadcast_ok")

    def Read(self) -> list[int]:
        """Every value broadcast to the node so far, in order."""
        return self._expect(Read(), "read_ok").body.messages or []

    def Topology(self, topology: dict[str, list[str]]) -> None:
        self._expect(Topology(topology=topology), "topology_ok")

    def close(self) -> str:
        """Close the node's input so it exits; return whatever it wrote to stderr."""
        if self._stderr is not None:
            return self._stderr
        try:
            _, err = self._proc.communicate(timeout=self._timeout)
        except subprocess.TimeoutExpired:
            self._proc.kill()
            _, err = self._proc.communicate()
        self._stderr = err or ""
        return self._stderr

    @property
    def returncode(self) -> Optional[int]:
        return self._proc.returncode
