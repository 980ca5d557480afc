"""Tests for the message model: parse, serialize, and what counts as malformed."""

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from protocol import (
    Broadcast,
    Echo,
    Envelope,
    Init,
    ParseError,
    ReadOk,
    Topology,
    TopologyOk,
    decode_message,
    encode_message,
    parse,
    serialize,
)


class TestParse:
    def test_parse_init(self):
        env = parse('{"src": "c1","dest": "n1","body": {"type": "init","msg_id": 1}}')
        assert env.src == "c1"
        assert env.dest == "n1"
        assert isinstance(env.body, Init)
        assert env.body.msg_id == 1
        assert env.body.in_reply_to is None

    def test_parse_picks_variant_by_type(self):
        env = parse('{"src": "c1","dest": "n1","body": {"type": "broadcast","msg_id": 1, "message": -1}}')
        assert isinstance(env.body, Broadcast)
        assert env.body.message == -1

    def test_parse_topology(self):
        env = parse('{"src": "c1","dest": "n1","body": {"type": "topology","msg_id": 1, "topology": {"n1": ["n2", "n3"]}}}')
        assert isinstance(env.body, Topology)
        assert env.body.topology == {"n1": ["n2", "n3"]}

    def test_msg_id_is_optional(self):
        env = parse('{"src": "c1","dest": "n1","body": {"type": "echo","echo": "hi"}}')
        assert isinstance(env.body, Echo)
        assert env.body.msg_id is None

    def test_reply_variants_parse_too(self):
        env = parse('{"src": "n1","dest": "c1","body": {"type": "read_ok","in_reply_to": 3, "messages": [-1, 0]}}')
        assert isinstance(env.body, ReadOk)
        assert env.body.messages == [-1, 0]

    def test_unknown_keys_are_ignored(self):
        env = parse('{"src": "c1","dest": "n1","id": 7,"body": {"type": "init","msg_id": 1,"node_id": "n1","node_ids": ["n1"]}}')
        assert isinstance(env.body, Init)


class TestParseErrors:
    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"src": "c1", "dest": "n1", "body": {"type": "init"}',
            "[1, 2, 3]",
            '{"src": "c1", "dest": "n1", "body": {"msg_id": 1}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "explode", "msg_id": 1}}',
            '{"src": "c1", "body": {"type": "init"}}',
            '{"src": 1, "dest": "n1", "body": {"type": "init"}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "init", "msg_id": "1"}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "init", "msg_id": true}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "echo", "echo": 35}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "broadcast", "message": "5"}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "broadcast", "msg_id": 1}}',
            '{"src": "c1", "dest": "n1", "body": {"type": "topology", "topology": {"n1": "n2"}}}',
        ],
    )
    def test_rejected(self, text):
        with pytest.raises(ParseError):
            parse(text)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse("{")

    def test_decode_rejects_bad_utf8(self):
        with pytest.raises(ParseError):
            decode_message(b"\xff\xfe{}\n")


class TestSerialize:
    def test_unset_fields_are_omitted(self):
        env = Envelope(src="n1", dest="c1", body=TopologyOk(in_reply_to=4))
        assert json.loads(serialize(env)) == {"src": "n1", "dest": "c1", "body": {"type": "topology_ok", "in_reply_to": 4}}
        assert "null" not in serialize(env)

    def test_field_order(self):
        env = Envelope(src="n1", dest="c1", body=ReadOk(msg_id=2, in_reply_to=3, messages=[1]))
        assert serialize(env) == '{"src": "n1", "dest": "c1", "body": {"type": "read_ok", "msg_id": 2, "in_reply_to": 3, "messages": [1]}}'

    def test_single_line(self):
        env = Envelope(src="c1", dest="n1", body=Echo(msg_id=1, echo="line\nbreak"))
        assert "\n" not in serialize(env)

    def test_round_trip(self):
        text = '{"src": "c1", "dest": "n1", "body": {"type": "topology", "msg_id": 1, "topology": {"n1": ["n2", "n3"], "n2": []}}}'
        assert serialize(parse(text)) == text

    def test_encode_decode_bytes(self):
        env = Envelope(src="c1", dest="n1", body=Broadcast(msg_id=9, message=42))
        data = encode_message(env)
        assert data.endswith(b"\n")
        assert decode_message(data) == env
