import sys
import json
import subprocess
from pathlib import Path


def run_cli(args, cwd=None, stdin=None):
    proc = subprocess.run(
        [sys.executable, "-m", "quantrank.cli", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        input=stdin,
    )
    return proc


def make_values(tmp_path: Path, lines, name="values.txt") -> Path:
    p = tmp_path / name
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def test_compute_multiple_fractions(tmp_path):
    values = make_values(tmp_path, ["4", "1", "", "3", "2"])
    proc = run_cli(["compute", str(values), "-q", "0.25", "-q", "0.5", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    lines = proc.stdout.strip().splitlines()
    assert lines == ["q=0.25 1.75", "q=0.5 2.5"]


def test_compute_json_output(tmp_path):
    values = make_values(tmp_path, ["1.5", "0.5", "2.5"])
    json_out = tmp_path / "out.json"
    proc = run_cli(["compute", str(values), "--preset", "extremes", "--json", str(json_out), "--no-color"])
    assert proc.returncode == 0, proc.stderr
    data = json.loads(json_out.read_text(encoding="utf-8"))
    assert data == [{"q": 0.0, "value": 0.5}, {"q": 1.0, "value": 2.5}]


def test_compute_percentiles_with_tier(tmp_path):
    values = make_values(tmp_path, [str(v) for v in range(1, 11)])
    proc = run_cli(["compute", str(values), "-p", "50", "--tier", "int32", "--interpolation", "nearest", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    # position 4.5 rounds up to index 5
    assert proc.stdout.strip() == "q=0.5 6.0"


def test_decimal_tier_is_exact(tmp_path):
    values = make_values(tmp_path, ["0.1", "0.2"])
    proc = run_cli(["median", str(values), "--tier", "decimal", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "q=0.5 0.15"


def test_median_of_dates_from_stdin():
    proc = run_cli(["median", "-", "--tier", "date", "--no-color"], stdin="2024-03-09\n2024-03-01\n2024-03-05\n")
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "q=0.5 2024-03-05"


def test_empty_file_reports_na(tmp_path):
    values = make_values(tmp_path, [""])
    proc = run_cli(["median", str(values), "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "q=0.5 NA"


def test_out_of_range_fraction_fails(tmp_path):
    values = make_values(tmp_path, ["1", "2"])
    proc = run_cli(["compute", str(values), "-q", "1.5", "--no-color"])
    assert proc.returncode == 2
    assert "[0.0, 1.0]" in proc.stderr


def test_linear_on_strings_fails(tmp_path):
    values = make_values(tmp_path, ["b", "a"])
    proc = run_cli(["compute", str(values), "--interpolation", "linear", "--no-color"])
    assert proc.returncode == 2
    assert "LINEAR" in proc.stderr


def test_unparseable_value_reports_line(tmp_path):
    values = make_values(tmp_path, ["1.0", "oops"])
    proc = run_cli(["median", str(values), "--tier", "float64", "--no-color"])
    assert proc.returncode == 2
    assert "line 2" in proc.stderr


def test_missing_file(tmp_path):
    proc = run_cli(["median", str(tmp_path / "nope.txt"), "--no-color"])
    assert proc.returncode == 2
    assert "file not found" in proc.stderr


def test_verbose_logs_strategy(tmp_path):
    values = make_values(tmp_path, ["3.0", "1.0", "2.0"])
    proc = run_cli(["compute", str(values), "-q", "0.5", "--verbose", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert "strategy=select" in proc.stderr
    proc2 = run_cli(["compute", str(values), "--preset", "quartiles", "--verbose", "--no-color"])
    assert "strategy=sort" in proc2.stderr


def test_timedelta_tier_orders_by_duration(tmp_path):
    # as text "10:00:00" < "8:00:00" < "9:00:00"
    values = make_values(tmp_path, ["10:00:00", "9:00:00", "8:00:00"])
    proc = run_cli(["compute", str(values), "--tier", "timedelta", "--preset", "extremes", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip().splitlines() == ["q=0 8:00:00", "q=1 10:00:00"]


def test_datetime64_tier(tmp_path):
    values = make_values(tmp_path, ["2024-03-09", "2024-03-01", "2024-03-05"])
    proc = run_cli(["median", str(values), "--tier", "datetime64[D]", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "q=0.5 2024-03-05"


def test_bool_tier_is_strict(tmp_path):
    values = make_values(tmp_path, ["true", "false", "false"])
    proc = run_cli(["median", str(values), "--tier", "bool", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "q=0.5 False"
    bad = make_values(tmp_path, ["true", "yes"], name="bad.txt")
    proc2 = run_cli(["median", str(bad), "--tier", "bool", "--no-color"])
    assert proc2.returncode == 2
    assert "line 2" in proc2.stderr


def test_int_tier_rejects_fractional_values(tmp_path):
    values = make_values(tmp_path, ["1", "2.5"])
    proc = run_cli(["median", str(values), "--tier", "int32", "--no-color"])
    assert proc.returncode == 2
    assert "line 2" in proc.stderr
