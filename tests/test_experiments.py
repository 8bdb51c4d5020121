import csv

import pytest

import experiments


@pytest.mark.parametrize("name", sorted(experiments.GENERATOR_REGISTRY))
def test_generators_are_seeded(name):
    dataset_name, a = experiments.generate_dataset(name, 256, seed=4)
    _, b = experiments.generate_dataset(name, 256, seed=4)
    assert dataset_name == name
    assert len(a) == 256
    assert a == b


def test_unknown_generator_falls_back_to_uniform():
    dataset_name, text = experiments.generate_dataset("nope", 64, seed=1)
    assert dataset_name == "nope_fallback_uniform"
    assert text == experiments.gen_uniform(64, seed=1)


def test_run_one_metrics():
    row = experiments.run_one("abracadabra")
    assert row.correctness_ok == 1
    assert row.input_symbols == 11
    assert row.unique_symbols == 5
    assert row.encoded_bits == 23
    assert row.compression_ratio == pytest.approx(23 / 88)
    assert row.bits_per_symbol == pytest.approx(23 / 11)
    assert row.total_ms >= 0.0


def test_repetitive_text_compresses_better_than_uniform():
    _, uniform = experiments.generate_dataset("uniform", 4096, seed=7)
    _, repetitive = experiments.generate_dataset("repetitive99", 4096, seed=7)
    assert experiments.run_one(repetitive).compression_ratio < experiments.run_one(uniform).compression_ratio


def test_power_of_two_sizes():
    assert experiments.power_of_two_sizes(1024, 8192) == [1024, 2048, 4096, 8192]


def test_main_writes_csv_files(tmp_path, capsys):
    rc = experiments.main([
        "--outdir", str(tmp_path), "--runs", "2", "--no_plots",
        "--exp1_size_kb", "1", "--exp1_generators", "uniform,zipf",
        "--exp2_min_kb", "1", "--exp2_max_kb", "2", "--exp2_generators", "english_like",
    ])
    assert rc == 0

    with (tmp_path / "metrics.csv").open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    # exp1: 2 generators x 2 runs, exp2: 1 generator x 2 sizes x 2 runs
    assert len(rows) == 8
    assert all(r["correctness_ok"] == "1" for r in rows)

    with (tmp_path / "summary.csv").open(newline="", encoding="utf-8") as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 4
    assert all(s["n_runs"] == "2" for s in summary)
    assert all(float(s["correctness_ok_rate"]) == 1.0 for s in summary)

    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out


def test_main_writes_plots(tmp_path):
    rc = experiments.main([
        "--outdir", str(tmp_path), "--runs", "1",
        "--exp1_size_kb", "1", "--exp1_generators", "zipf",
        "--exp2_min_kb", "1", "--exp2_max_kb", "1", "--exp2_generators", "uniform",
    ])
    assert rc == 0
    assert (tmp_path / "exp1_compression_ratio.png").exists()
    assert (tmp_path / "exp1_total_time.png").exists()
    assert (tmp_path / "exp2_stage_time_uniform.png").exists()
