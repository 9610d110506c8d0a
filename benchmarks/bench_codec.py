#!/usr/bin/env python3
"""
Benchmark: chatframe request encoding and response parsing

Measures latency and throughput for:
  1. encode_request (short, uncompressed conversations)
  2. encode_request (long, gzip-compressed conversations)
  3. parse_response over a buffer of streamed response frames
  4. StreamDecoder fed the same buffer in fixed-size chunks

Usage:
  $ python benchmarks/bench_codec.py --runs 1000 --size 16384
"""
from __future__ import annotations

import argparse
import base64
import gzip
import struct
import time
from collections.abc import Callable
from statistics import quantiles

import numpy as np
from rich import box
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from chatframe import ChatResponse, Frame, FrameTag, StreamDecoder, encode_request, pack_frame, parse_response

UNITS = {"ns": 1e9, "us": 1e6, "ms": 1e3}


# ---------------------------------------------------------------------------
# Payload generation
# ---------------------------------------------------------------------------
def random_text(rng: np.random.Generator, size: int) -> str:
    letters = np.frombuffer(b"abcdefghijklmnopqrstuvwxyz     ", dtype=np.uint8)
    return rng.choice(letters, size=size).tobytes().decode("ascii")


def random_png_uri(rng: np.random.Generator, width: int, height: int, size: int) -> str:
    header = b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 13) + b"IHDR" + struct.pack(">II", width, height)
    body = rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()
    return "data:image/png;base64," + base64.b64encode(header + body).decode()


def make_turns(rng: np.random.Generator, count: int, size: int, with_image: bool = False) -> list[dict]:
    turns: list[dict] = [{"role": "system", "content": "You are a helpful assistant."}]
    for i in range(count):
        role = "user" if i % 2 == 0 else "assistant"
        turns.append({"role": role, "content": random_text(rng, size)})
    if with_image:
        turns[-1] = {
            "role": "user",
            "content": [
                {"type": "text", "text": "Describe this image."},
                {"type": "image_url", "image_url": {"url": random_png_uri(rng, 640, 480, size)}},
            ],
        }
    return turns


def make_response_buffer(rng: np.random.Generator, frames: int, size: int) -> bytes:
    chunks = []
    for i in range(frames):
        message = ChatResponse()
        if i < frames // 4:
            message.message.thinking.content = random_text(rng, size)
        else:
            message.message.content = random_text(rng, size)
        payload = message.SerializeToString()
        if i % 2:
            chunks.append(pack_frame(Frame(tag=FrameTag.PROTO_GZIP, payload=gzip.compress(payload))))
        else:
            chunks.append(pack_frame(Frame(tag=FrameTag.PROTO, payload=payload)))
    return b"".join(chunks)


# ---------------------------------------------------------------------------
# Benchmarks
# ---------------------------------------------------------------------------
def bench(label: str, fn: Callable[[], object], runs: int) -> list[float]:
    latencies = []
    for _ in tqdm(range(runs), desc=label):
        t0 = time.perf_counter()
        fn()
        latencies.append(time.perf_counter() - t0)
    return latencies


def feed_in_chunks(buffer: bytes, chunk_size: int) -> None:
    decoder = StreamDecoder()
    for i in range(0, len(buffer), chunk_size):
        decoder.feed(buffer[i : i + chunk_size])
    decoder.close()


def summarise(latencies: list[float], size_bytes: int, unit: str = "us") -> dict[str, float]:
    if len(latencies) < 2:
        return {"p50": float("nan"), "p95": float("nan"), "p99": float("nan"), "thr": 0.0}
    lat = [t * UNITS[unit] for t in latencies]
    cuts = quantiles(lat, n=100)
    p50, p95, p99 = cuts[49], cuts[94], cuts[98]
    throughput = (size_bytes * len(latencies)) / sum(latencies) / (2**20)  # MiB/s
    return {"p50": p50, "p95": p95, "p99": p99, "thr": throughput}


def print_table(results: dict[str, dict[str, float]], unit: str = "us"):
    console = Console()
    table = Table(title="chatframe Codec Benchmark Results", box=box.SIMPLE_HEAVY)
    table.add_column("Operation")
    table.add_column(f"p50 ({unit}, ↓)")
    table.add_column(f"p95 ({unit}, ↓)")
    table.add_column(f"p99 ({unit}, ↓)")
    table.add_column("Throughput (MiB/s, ↑)")
    for k, v in results.items():
        table.add_row(k, f"{v['p50']:.2f}", f"{v['p95']:.2f}", f"{v['p99']:.2f}", f"{v['thr']:.1f}")
    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="Benchmark chatframe encode/parse")
    parser.add_argument("--runs", type=int, default=100, help="Number of benchmark runs")
    parser.add_argument("--size", type=int, default=1024, help="Text size per message in bytes")
    parser.add_argument("--frames", type=int, default=64, help="Frames per response buffer")
    parser.add_argument("--chunk", type=int, default=1400, help="Chunk size for the stream decoder")
    parser.add_argument("--unit", choices=["us", "ms", "ns"], default="us", help="Latency unit")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    short_turns = make_turns(rng, 2, args.size)
    long_turns = make_turns(rng, 8, args.size, with_image=True)
    buffer = make_response_buffer(rng, args.frames, args.size)

    print(f"Benchmarking {args.runs} runs with {args.size} byte messages, {len(buffer)} byte response buffer")

    results = {
        "encode (2 msgs, raw)": summarise(
            bench("encode short", lambda: encode_request(short_turns, "bench-model"), args.runs), 2 * args.size, args.unit
        ),
        "encode (8 msgs, gzip)": summarise(
            bench("encode long", lambda: encode_request(long_turns, "bench-model"), args.runs), 8 * args.size, args.unit
        ),
        "parse_response": summarise(bench("parse", lambda: parse_response(buffer), args.runs), len(buffer), args.unit),
        f"StreamDecoder ({args.chunk} B chunks)": summarise(
            bench("stream", lambda: feed_in_chunks(buffer, args.chunk), args.runs), len(buffer), args.unit
        ),
    }

    result = parse_response(buffer)
    print(f"Decoded {result.frames} frames: {len(result.reasoning)} reasoning chars, {len(result.content)} content chars")
    print_table(results, args.unit)


if __name__ == "__main__":
    main()
