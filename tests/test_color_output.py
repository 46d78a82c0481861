import os
import sys
import subprocess


def test_compute_no_color(tmp_path):
    values = tmp_path / "values.txt"
    values.write_text("1.0\n2.0\n3.0\n", encoding="utf-8")
    # Run with --no-color and capture output
    proc = subprocess.run([
        sys.executable,
        "-m",
        "quantrank.cli",
        "compute",
        str(values),
        "--no-color",
    ], capture_output=True, text=True)
    assert proc.returncode == 0
    assert "\x1b[" not in proc.stdout  # no ANSI escapes
    assert proc.stdout.strip() == "q=0.5 2.0"


def test_compute_color_if_rich(tmp_path):
    # If rich is installed in environment, we expect a colored table unless --no-color provided.
    try:
        import rich  # noqa: F401
    except Exception:
        return  # skip silently if rich not available
    values = tmp_path / "values2.txt"
    values.write_text("1.0\n2.0\n3.0\n4.0\n", encoding="utf-8")
    env = os.environ.copy()
    env["FORCE_COLOR"] = "1"
    proc = subprocess.run([
        sys.executable,
        "-m",
        "quantrank.cli",
        "compute",
        str(values),
        "--preset",
        "quartiles",
    ], capture_output=True, text=True, env=env)
    assert proc.returncode == 0
    assert "2.5" in proc.stdout and "1.75" in proc.stdout
    # Accept either ANSI escapes or (fallback) plain output if rich failed to color (rare Windows CI cases).
    if "\x1b[" not in proc.stdout:
        assert "q=0.5 2.5" in proc.stdout
