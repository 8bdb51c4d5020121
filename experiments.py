# experiments.py

"""
Huffman text codec experiments

Runs the codec over synthetic text at several distributions and sizes,
with repeated runs, and reports compression ratio and per-stage timings

Outputs (in --outdir):
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts, unless --no_plots)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 256 --exp2_max_kb 2048
  python experiments.py --outdir results --runs 5 --exp1_generators uniform,zipf,english_like
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import huffman as huff


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def weighted_choice(rng: random.Random, chars: Sequence[str], weights: Sequence[float], size: int) -> str:
    return "".join(rng.choices(chars, weights=weights, k=size))


# Synthetic text generators

PRINTABLE = string.ascii_letters + string.digits + string.punctuation + " \n"

def gen_uniform(size: int, alphabet: str = PRINTABLE, seed: int = 0) -> str:
    rng = random.Random(seed)
    return "".join(rng.choice(alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "a", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [c for c in PRINTABLE if c != dominant]
    out = []
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(others))
    return "".join(out)

def gen_zipf_like(size: int, alphabet: str = string.ascii_lowercase, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    weights = [1.0 / ((i + 1) ** s) for i in range(len(alphabet))]
    return weighted_choice(rng, alphabet, weights, size)

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == " ":
            weights.append(13.0)
        elif ch == "\n":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return weighted_choice(rng, chars, weights, size)

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform": lambda size, seed: gen_uniform(size, seed=seed),
    "zipf": lambda size, seed: gen_zipf_like(size, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    """
    Unknown generator names fall back to uniform so one typo does not
    abort the whole run
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform", gen_uniform(size, seed=seed)
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    input_symbols: int
    run_id: int
    unique_symbols: int

    count_ms: float
    build_tree_ms: float
    build_codes_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    compression_ratio: float
    bits_per_symbol: float
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    t0 = now_ns()
    ft = huff.count_frequencies(text)
    t1 = now_ns()
    root = huff.build_huffman_tree(ft)
    t2 = now_ns()
    code_map = huff.generate_huffman_codes(root)
    t3 = now_ns()
    encoded = huff.huffman_encode(text, code_map)
    t4 = now_ns()
    decoded = huff.huffman_decode_text(encoded, root)
    t5 = now_ns()

    return MetricRow(
        exp_name="",
        dataset_name="",
        input_symbols=len(text),
        run_id=0,
        unique_symbols=len(ft),
        count_ms=ns_to_ms(t1 - t0),
        build_tree_ms=ns_to_ms(t2 - t1),
        build_codes_ms=ns_to_ms(t3 - t2),
        encode_ms=ns_to_ms(t4 - t3),
        decode_ms=ns_to_ms(t5 - t4),
        total_ms=ns_to_ms(t5 - t0),
        encoded_bits=len(encoded),
        compression_ratio=huff.compression_ratio(encoded, len(text)),
        bits_per_symbol=huff.weighted_code_length(ft, code_map) / max(1, len(text)),
        correctness_ok=1 if decoded == text else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    names = [f.name for f in fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=names)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in names})


SUMMARY_METRICS = ("compression_ratio", "bits_per_symbol", "build_tree_ms", "encode_ms", "decode_ms", "total_ms")

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, input_symbols and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.input_symbols)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "input_symbols", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "input_symbols": size,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> List[Path]:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return []

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))
    written = []

    for field, ylabel, title, fname in (
        ("compression_ratio", "Encoded Bits / (8 x Symbols)", "Compression Ratio", "exp1_compression_ratio.png"),
        ("total_ms", "Total Time (ms) (count + build + encode + decode)", "Total Runtime", "exp1_total_time.png"),
    ):
        plt.figure()
        plt.bar(x, [mean_for(d, field) for d in datasets])
        plt.xticks(x, datasets, rotation=20, ha="right")
        plt.ylabel(ylabel)
        plt.title(f"Experiment 1: {title} by Distribution")
        plt.tight_layout()
        plt.savefig(outdir / fname, dpi=200)
        plt.close()
        written.append(outdir / fname)

    return written


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> List[Path]:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return []

    distributions = sorted(set(r.dataset_name for r in exp_rows))
    stages = ("build_tree_ms", "encode_ms", "decode_ms")
    written = []

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.input_symbols for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.input_symbols == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for stage in stages:
            plt.plot(sizes, [mean_size(s, stage) for s in sizes], marker="o", label=stage)
        plt.xlabel("Input Size (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Stage Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        fname = outdir / f"exp2_stage_time_{dist}.png"
        plt.savefig(fname, dpi=200)
        plt.close()
        written.append(fname)

    return written


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def power_of_two_sizes(min_bytes: int, max_bytes: int) -> List[int]:
    sizes: List[int] = []
    s = min_bytes
    while s <= max_bytes:
        sizes.append(s)
        s *= 2
    return sizes

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Write CSV files only")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=128, help="Experiment 1 fixed input size in K symbols")
    ap.add_argument("--exp1_generators", type=str, default="uniform,zipf,repetitive90,english_like",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2 min size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=1024, help="Experiment 2 max size in K symbols")
    ap.add_argument("--exp2_generators", type=str, default="uniform,zipf,english_like",
                    help="Comma-separated dataset generator names for experiment 2")

    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, text = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                row = run_one(text)
                row.exp_name = "exp1_distribution"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    # Experiment 2: size scaling
    if not args.no_exp2:
        sizes = power_of_two_sizes(max(1, args.exp2_min_kb) * 1024, max(1, args.exp2_max_kb) * 1024)
        for gen_name in parse_csv_list(args.exp2_generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, text = generate_dataset(gen_name, size, args.seed + 10_000 + size + run_id)
                    row = run_one(text)
                    row.exp_name = "exp2_size_scaling"
                    row.dataset_name = dataset_name
                    row.run_id = run_id
                    rows.append(row)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
