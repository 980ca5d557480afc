"""Throughput benchmark: replies/sec for broadcast and read as the node's log grows."""

import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from client import NodeClient


def main():
    with NodeClient(timeout=30.0) as client:
        client.Init()
        recorded = 0
        # Grow the log to different sizes, then measure broadcast and read throughput
        for n_pre in [0, 1_000, 10_000, 50_000]:
            while recorded < n_pre:
                client.Broadcast(recorded)
                recorded += 1
            n_ops = 2000
            start = time.perf_counter()
            for i in range(n_ops):
                client.Broadcast(i)
            elapsed = time.perf_counter() - start
            recorded += n_ops
            print(f"Log size {n_pre:>6} -> {n_ops / elapsed:>8.0f} broadcasts/sec ({n_ops} in {elapsed:.2f}s)")

            n_reads = 200
            start = time.perf_counter()
            for _ in range(n_reads):
                client.Read()
            elapsed = time.perf_counter() - start
            print(f"Log size {recorded:>6} -> {n_reads / elapsed:>8.0f} reads/sec ({n_reads} in {elapsed:.2f}s)")
    print("Done.")


if __name__ == "__main__":
    main()
