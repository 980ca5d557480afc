"""Single-node responder: read one JSON message per stdin line, write one reply per stdout line."""

import sys
from typing import TextIO

import structlog

from logs import setup_logging
from maelstrom_node import Memory, evaluate
from protocol import ParseError, parse, serialize

logger = structlog.get_logger(__name__)


def serve(
    instream: TextIO,
    outstream: TextIO,
    memory: Memory | None = None,
    on_malformed: str = "skip",
) -> int:
    """Blocking read-evaluate-write loop. Returns the number of replies written.

    Ends on end of input or a read error. A malformed line produces no reply; it is
    either skipped or, with on_malformed="abort", ends the loop.
    """
    if memory is None:
        memory = Memory()
    replies = 0
    while True:
        try:
            line = instream.readline()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("read_failed", error=str(e))
            break
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        try:
            envelope = parse(line)
        except ParseError as e:
            logger.warning("malformed_line", line=line[:200], error=str(e))
            if on_malformed == "abort":
                break
            continue
        evaluate(envelope, memory)
        outstream.write(serialize(envelope) + "\n")
        outstream.flush()
        replies += 1
    return replies


def main(argv: list[str] | None = None) -> None:
    import argparse
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-format", choices=["console", "json"], default="console")
    parser.add_argument("--on-malformed", choices=["skip", "abort"], default="skip")
    args = parser.parse_args(argv)
    setup_logging(log_level=args.log_level, log_format=args.log_format)
    logger.info("node_started", on_malformed=args.on_malformed)
    replies = serve(sys.stdin, sys.stdout, on_malformed=args.on_malformed)
    logger.info("node_stopped", replies=replies)


if __name__ == "__main__":
    main()
