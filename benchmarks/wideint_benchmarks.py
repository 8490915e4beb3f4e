"""Scalar and vectorised throughput benchmarks for wideint."""

from __future__ import annotations

import argparse
import json
import random
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable

from _bench_utils import host_metadata, mean, percentile, sample_ms, stddev

from wideint import BigInt, Fixed64, add_pairs, fixed64_to_array, small_value_cache_stats

PROFILE_PRESETS: dict[str, dict[str, int]] = {
    "quick": {"samples": 3, "warmup": 1, "repeats": 20, "batch": 4_096},
    "full": {"samples": 9, "warmup": 3, "repeats": 100, "batch": 65_536},
}


@dataclass(frozen=True)
class BenchCase:
    group: str
    name: str
    build: Callable[[random.Random, int], tuple[Callable[..., object], tuple[object, ...]]]


@dataclass(frozen=True)
class BenchRow:
    group: str
    case: str
    repeats: int
    samples: int
    mean_ms: float
    p50_ms: float
    p90_ms: float
    stddev_ms: float


def _bigint(rng: random.Random, bits: int) -> BigInt:
    return BigInt.from_int(rng.getrandbits(bits) | 1)


def _build_bigint_multiply(rng: random.Random, _batch: int):
    a, b = _bigint(rng, 1024), _bigint(rng, 1024)
    return a.multiply, (b,)


def _build_bigint_quotient(rng: random.Random, _batch: int):
    a, b = _bigint(rng, 2048), _bigint(rng, 700)
    return a.quotient, (b,)


def _build_bigint_quotient_scaled(rng: random.Random, _batch: int):
    a, b = _bigint(rng, 4096), _bigint(rng, 1500)
    return a.quotient, (b,)


def _build_bigint_to_string(rng: random.Random, _batch: int):
    return _bigint(rng, 1024).to_string, ()


def _build_fixed64_multiply(rng: random.Random, _batch: int):
    a = Fixed64.from_int(rng.getrandbits(64))
    b = Fixed64.from_int(rng.getrandbits(64))
    return a.multiply, (b,)


def _build_fixed64_quotient(rng: random.Random, _batch: int):
    a = Fixed64.from_int(rng.getrandbits(63))
    b = Fixed64.from_int(rng.getrandbits(20) | 1)
    return a.quotient, (b,)


def _build_add_pairs(rng: random.Random, batch: int):
    left = fixed64_to_array(Fixed64.from_int(rng.getrandbits(64)) for _ in range(batch))
    right = fixed64_to_array(Fixed64.from_int(rng.getrandbits(64)) for _ in range(batch))
    return add_pairs, (left, right)


CASES: tuple[BenchCase, ...] = (
    BenchCase(group="bigint", name="multiply_1024", build=_build_bigint_multiply),
    BenchCase(group="bigint", name="quotient_2048_by_700", build=_build_bigint_quotient),
    BenchCase(group="bigint", name="quotient_4096_by_1500", build=_build_bigint_quotient_scaled),
    BenchCase(group="bigint", name="to_string_1024", build=_build_bigint_to_string),
    BenchCase(group="fixed64", name="multiply", build=_build_fixed64_multiply),
    BenchCase(group="fixed64", name="quotient", build=_build_fixed64_quotient),
    BenchCase(group="arrays", name="add_pairs", build=_build_add_pairs),
)


def run_benchmarks(*, seed: int, repeats: int, warmup: int, samples: int, batch: int, groups: set[str]) -> list[BenchRow]:
    rng = random.Random(seed)
    rows: list[BenchRow] = []
    for case in CASES:
        if groups and case.group not in groups:
            continue
        fn, args = case.build(rng, batch)
        timings = sample_ms(fn, args, repeats=repeats, warmup=warmup, samples=samples)
        row = BenchRow(
            group=case.group,
            case=case.name,
            repeats=repeats,
            samples=len(timings),
            mean_ms=mean(timings),
            p50_ms=percentile(timings, 0.5),
            p90_ms=percentile(timings, 0.9),
            stddev_ms=stddev(timings),
        )
        print(f"{row.group:8s} {row.case:24s} mean={row.mean_ms:9.4f} ms  p90={row.p90_ms:9.4f} ms")
        rows.append(row)
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Run wideint scalar and array benchmarks.")
    parser.add_argument("--profile", choices=sorted(PROFILE_PRESETS), default="quick", help="fixed benchmark profile")
    parser.add_argument("--samples", type=int, default=None, help="override timing sample count")
    parser.add_argument("--warmup", type=int, default=None, help="override warmup rounds")
    parser.add_argument("--repeats", type=int, default=None, help="override calls per sample")
    parser.add_argument("--batch", type=int, default=None, help="batch length for array kernels")
    parser.add_argument("--group", action="append", default=[], help="restrict to a case group (repeatable)")
    parser.add_argument("--seed", type=int, default=0, help="operand generator seed")
    parser.add_argument(
        "--json-out",
        default="",
        help="optional path to write machine-readable benchmark results",
    )
    args = parser.parse_args()

    profile = PROFILE_PRESETS[args.profile]
    samples = int(profile["samples"] if args.samples is None else args.samples)
    warmup = int(profile["warmup"] if args.warmup is None else args.warmup)
    repeats = int(profile["repeats"] if args.repeats is None else args.repeats)
    batch = int(profile["batch"] if args.batch is None else args.batch)

    print("wideint benchmark suite")
    print(f"config: profile={args.profile}, samples={samples}, warmup={warmup}, repeats={repeats}, batch={batch}")
    print()

    rows = run_benchmarks(
        seed=args.seed,
        repeats=repeats,
        warmup=warmup,
        samples=samples,
        batch=batch,
        groups=set(args.group),
    )

    if args.json_out:
        payload = {
            "timestamp_utc": datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ"),
            "config": {
                "profile": args.profile,
                "samples": samples,
                "warmup": warmup,
                "repeats": repeats,
                "batch": batch,
                "seed": args.seed,
                "groups": sorted(args.group),
            },
            "host": host_metadata(),
            "small_value_cache": small_value_cache_stats(),
            "rows": [asdict(row) for row in rows],
        }
        outpath = Path(args.json_out)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        outpath.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote JSON benchmark output: {outpath}")


if __name__ == "__main__":
    main()
