"""Benchmark pptx_opc load and save runtime."""

from __future__ import annotations

import argparse
import statistics
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from pptx_opc import OpcPackage  # noqa: E402


def _summary(label: str, timings: list[float]) -> str:
    avg = statistics.mean(timings)
    p95 = statistics.quantiles(timings, n=20)[-1] if len(timings) >= 2 else timings[0]
    return (
        f"{label}: Avg: {avg:.4f}s, Min: {min(timings):.4f}s, "
        f"Max: {max(timings):.4f}s, P95: {p95:.4f}s"
    )


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("pptx_path", type=Path, help="Path to PPTX file")
    parser.add_argument("--iterations", type=int, default=5)
    parser.add_argument("--strict", action="store_true", help="Load with the strict policy")
    args = parser.parse_args()

    if not args.pptx_path.exists():
        print(f"File not found: {args.pptx_path}", file=sys.stderr)
        return 2

    data = args.pptx_path.read_bytes()
    load_timings = []
    save_timings = []
    output = b""
    for _ in range(args.iterations):
        start = time.perf_counter()
        package = OpcPackage.from_zip_bytes(data, strict=args.strict)
        load_timings.append(time.perf_counter() - start)

        start = time.perf_counter()
        output = package.to_zip_bytes()
        save_timings.append(time.perf_counter() - start)

    print(f"Iterations: {args.iterations}")
    print(f"Parts: {len(package)}, Input: {len(data)} bytes, Output: {len(output)} bytes")
    print(_summary("Load", load_timings))
    print(_summary("Save", save_timings))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
