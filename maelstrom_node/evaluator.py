"""Turn a request envelope into its reply, updating the node's memory where the request asks for it."""

import uuid

import structlog

from protocol import (
    Broadcast,
    BroadcastOk,
    Echo,
    EchoOk,
    Envelope,
    Generate,
    GenerateOk,
    Init,
    InitOk,
    Read,
    ReadOk,
    Topology,
    TopologyOk,
)

from .memory import Memory

logger = structlog.get_logger(__name__)


def new_id() -> str:
    """Fresh 128-bit random identifier."""
    return str(uuid.uuid4())


def evaluate(envelope: Envelope, memory: Memory) -> Envelope:
    """Rewrite envelope in place into the reply addressed back to its sender, and return it.

    Every reply carries in_reply_to = the request's msg_id (absent stays absent).
    Bodies that are not requests are logged and left untouched; only the addresses swap.
    """
    envelope.src, envelope.dest = envelope.dest, envelope.src
    body = envelope.body
    reply_to = body.msg_id

    if isinstance(body, Init):
        envelope.body = InitOk(msg_id=body.msg_id, in_reply_to=reply_to)
    elif isinstance(body, Echo):
        envelope.body = EchoOk(msg_id=body.msg_id, in_reply_to=reply_to, echo=body.echo)
    elif isinstance(body, Generate):
        envelope.body = GenerateOk(msg_id=body.msg_id, in_reply_to=reply_to, id=new_id())
    elif isinstance(body, Broadcast):
        memory.append(body.message)
        envelope.body = BroadcastOk(msg_id=body.msg_id, in_reply_to=reply_to)
    elif isinstance(body, Read):
        envelope.body = ReadOk(msg_id=body.msg_id, in_reply_to=reply_to, messages=memory.snapshot())
    elif isinstance(body, Topology):
        # acknowledged only; the topology itself is not kept
        envelope.body = TopologyOk(msg_id=body.msg_id, in_reply_to=reply_to)
    else:
        logger.warning("unrecognized_message_type", type=body.type, src=envelope.dest, msg_id=body.msg_id)
    return envelope
