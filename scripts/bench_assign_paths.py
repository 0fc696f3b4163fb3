# scripts/bench_assign_paths.py
"""
Microbench: assignment paths of the reference CPU driver.

What it measures
----------------
- `fill`               : scalar assignment (raw memset on dense tensors)
- `copy`               : equal-count dense assignment (raw copy fast path)
- `replicate`          : dense assignment replaying a smaller source
- `sub_matrix`         : strided destination window (generic path)
- `index_columns`      : gathered source (generic path)
- `accumulate_batch`   : in-place sum of a batch into a single row

Uses warmup iterations (not recorded), then repeats with median/p95.

Notes
-----
This benchmark includes validation and dispatch overhead on purpose, since it
dominates for small tensors.

Example
-------
python scripts/bench_assign_paths.py --rows 256 --cols 64 --warmup 20 --repeats 200
"""

from __future__ import annotations

import argparse
import math
import statistics
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

import numpy as np

from keytensor import BinaryOp, ExecutionContext, KeyTensorConfig, Tensor


# ----------------------------
# Stats helpers
# ----------------------------
def _median(xs: Sequence[float]) -> float:
    return statistics.median(xs) if xs else float("nan")


def _p95(xs: Sequence[float]) -> float:
    if not xs:
        return float("nan")
    ys = sorted(xs)
    k = int(math.ceil(0.95 * len(ys))) - 1
    return ys[max(0, min(k, len(ys) - 1))]


def _fmt_us(sec: float) -> str:
    return f"{sec * 1e6:10.1f} us"


@dataclass
class CaseResult:
    name: str
    med: float
    p95: float


def _time_case(fn: Callable[[], None], warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        fn()
    out: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        out.append(time.perf_counter() - t0)
    return out


def _build_cases(
    ctx: ExecutionContext, rows: int, cols: int
) -> Dict[str, Callable[[], None]]:
    rng = np.random.default_rng(0)
    src = Tensor.from_numpy(ctx, rng.standard_normal((rows, cols)))
    dest = Tensor.new(ctx, (rows, cols))
    row = Tensor.from_numpy(ctx, rng.standard_normal(cols))
    idx = Tensor.from_numpy(
        ctx, np.arange(cols)[::-1].copy(), datatype=np.int64
    )
    gathered = src.index_columns(idx)
    half = dest.sub_matrix(0, rows, 0, cols // 2)
    half_src = Tensor.new(ctx, (rows, cols // 2))
    acc = Tensor.new(ctx, (cols,))

    return {
        "fill": lambda: dest.fill(ctx, 1.0),
        "copy": lambda: dest.assign(ctx, src),
        "replicate": lambda: dest.assign(ctx, row),
        "sub_matrix": lambda: half.assign(ctx, half_src),
        "index_columns": lambda: dest.assign(ctx, gathered),
        "accumulate_batch": lambda: acc.accumulate(ctx, 1.0, src, 1.0, BinaryOp.ADD),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--rows", type=int, default=256)
    parser.add_argument("--cols", type=int, default=64)
    parser.add_argument("--warmup", type=int, default=20)
    parser.add_argument("--repeats", type=int, default=200)
    parser.add_argument(
        "--cases",
        nargs="*",
        default=None,
        help="Subset of cases to run (default: all).",
    )
    args = parser.parse_args()

    ctx = ExecutionContext.create(config=KeyTensorConfig())
    cases = _build_cases(ctx, args.rows, args.cols)
    selected = args.cases or list(cases)

    results: List[CaseResult] = []
    for name in selected:
        if name not in cases:
            parser.error(f"unknown case {name!r}; choose from {sorted(cases)}")
        samples = _time_case(cases[name], args.warmup, args.repeats)
        results.append(CaseResult(name, _median(samples), _p95(samples)))

    print(f"shape=({args.rows}, {args.cols}) repeats={args.repeats}")
    print(f"{'case':<18}{'median':>14}{'p95':>14}")
    for r in results:
        print(f"{r.name:<18}{_fmt_us(r.med):>14}{_fmt_us(r.p95):>14}")


if __name__ == "__main__":
    main()
