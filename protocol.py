"""Line-based JSON message protocol: envelope plus a body tagged by ``type``."""

import json
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

MsgId = Annotated[StrictInt, Field(ge=0)]


class ParseError(ValueError):
    """Raised when a line is not a valid message."""


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    msg_id: Optional[MsgId] = None
    in_reply_to: Optional[MsgId] = None


class Init(_Body):
    type: Literal["init"] = "init"


class InitOk(_Body):
    type: Literal["init_ok"] = "init_ok"


class Echo(_Body):
    type: Literal["echo"] = "echo"
    echo: Optional[StrictStr] = None


class EchoOk(_Body):
    type: Literal["echo_ok"] = "echo_ok"
    echo: Optional[StrictStr] = None


class Generate(_Body):
    type: Literal["generate"] = "generate"


class GenerateOk(_Body):
    type: Literal["generate_ok"] = "generate_ok"
    id: Optional[StrictStr] = None


class Broadcast(_Body):
    type: Literal["broadcast"] = "broadcast"
    message: StrictInt


class BroadcastOk(_Body):
    type: Literal["broadcast_ok"] = "broadcast_ok"


class Read(_Body):
    type: Literal["read"] = "read"


class ReadOk(_Body):
    type: Literal["read_ok"] = "read_ok"
    messages: Optional[list[StrictInt]] = None


class Topology(_Body):
    type: Literal["topology"] = "topology"
    topology: Optional[dict[StrictStr, list[StrictStr]]] = None


class TopologyOk(_Body):
    type: Literal["topology_ok"] = "topology_ok"


Body = Annotated[
    Union[
        Init, InitOk,
        Echo, EchoOk,
        Generate, GenerateOk,
        Broadcast, BroadcastOk,
        Read, ReadOk,
        Topology, TopologyOk,
    ],
    Field(discriminator="type"),
]


class Envelope(BaseModel):
    """One directed message: who sent it, who it is for, and what it says."""

    model_config = ConfigDict(extra="ignore")

    src: StrictStr
    dest: StrictStr
    body: Body


def parse(text: str) -> Envelope:
    """Parse a single JSON line into an Envelope. No lenient fallback."""
    try:
        return Envelope.model_validate_json(text)
    except ValidationError as e:
        raise ParseError(str(e)) from e


def _body_dict(body: _Body) -> dict:
    # type first, then the common fields, then the variant's own fields
    fields = body.model_dump(exclude_none=True)
    return {"type": fields.pop("type"), **fields}


def serialize(envelope: Envelope) -> str:
    """Serialize an Envelope as one JSON line (no trailing newline). Unset fields are omitted."""
    msg = {"src": envelope.src, "dest": envelope.dest, "body": _body_dict(envelope.body)}
    return json.dumps(msg)


def decode_message(data: bytes) -> Envelope:
    """Decode a message line."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(str(e)) from e
    return parse(text.strip())


def encode_message(envelope: Envelope) -> bytes:
    """Encode a message as a single newline-terminated JSON line."""
    return (serialize(envelope) + "\n").encode("utf-8")
