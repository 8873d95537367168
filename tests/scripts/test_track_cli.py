import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SCRIPT = PROJECT_ROOT / "scripts" / "track_cli.py"


def run_cli(args, cwd):
    env = os.environ.copy()
    src_dir = PROJECT_ROOT / "src"
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [env.get("PYTHONPATH", ""), str(src_dir)])
    )
    cmd = [sys.executable, str(SCRIPT), *args]
    return subprocess.run(cmd, env=env, cwd=cwd, capture_output=True, text=True)


def data_rows(path: Path):
    lines = [ln.strip() for ln in path.read_text(encoding="utf-8").splitlines()]
    lines = [ln for ln in lines if ln and not ln.startswith("#")]
    return lines[0], lines[1:]


def test_smooth_writes_output_and_log(tmp_path):
    inp = tmp_path / "bearings.tsv"
    inp.write_text("timestamp\tbearing\nt0\t100\nt1\t150\nt2\t150\n")
    out = tmp_path / "out" / "smoothed.tsv"
    log_dir = tmp_path / "logs"

    proc = run_cli(
        ["smooth", str(inp), "--alpha", "0.5", "--out", str(out), "--log-dir", str(log_dir)],
        cwd=tmp_path,
    )
    assert proc.returncode == 0, proc.stderr
    assert "alpha = 0.5" in proc.stdout

    header, rows = data_rows(out)
    assert header == "timestamp\tbearing\tsmoothed"
    assert [r.split("\t")[2] for r in rows] == ["100.0000", "125.0000", "137.5000"]

    logs = list(log_dir.glob("run_*.log"))
    assert len(logs) == 1
    assert "Wrote 3 smoothed bearings" in logs[0].read_text(encoding="utf-8")


def test_smooth_default_output_path(tmp_path):
    inp = tmp_path / "bearings.tsv"
    inp.write_text("bearing\n340\n30\n")
    proc = run_cli(["smooth", str(inp), "--log-dir", str(tmp_path / "logs")], cwd=tmp_path)
    assert proc.returncode == 0, proc.stderr
    _, rows = data_rows(tmp_path / "bearings_smoothed.tsv")
    # default alpha 0.5: 340 -> 30 goes through 0
    assert rows[1].split("\t") == ["NaN", "30.0000", "5.0000"]


def test_segments_open_with_rotation(tmp_path):
    inp = tmp_path / "track.tsv"
    inp.write_text("radius\tangle\n10\t0\n10\t90\n10\t180\n")
    out = tmp_path / "segments.tsv"
    proc = run_cli(
        [
            "segments", str(inp), "--open", "--out", str(out),
            "--set", "converter.kind=rotation",
            "--set", "converter.rotation_deg=90",
            "--log-dir", str(tmp_path / "logs"),
        ],
        cwd=tmp_path,
    )
    assert proc.returncode == 0, proc.stderr
    assert "Wrote 2 segments" in proc.stdout
    header, rows = data_rows(out)
    assert header == "start_x\tstart_y\tend_x\tend_y"
    assert len(rows) == 2
    sx, sy, ex, ey = (float(v) for v in rows[0].split("\t"))
    assert (round(sx, 4), round(sy, 4)) == (0.0, 10.0)
    assert (round(ex, 4), round(ey, 4)) == (-10.0, 0.0)


def test_segments_closed_by_default(tmp_path):
    inp = tmp_path / "track.tsv"
    inp.write_text("x\ty\n0\t0\n0\t20\n30\t40\n")
    out = tmp_path / "segments.tsv"
    proc = run_cli(
        ["segments", str(inp), "--out", str(out), "--log-dir", str(tmp_path / "logs")],
        cwd=tmp_path,
    )
    assert proc.returncode == 0, proc.stderr
    _, rows = data_rows(out)
    assert len(rows) == 3
    assert rows[-1] == "30.0000\t40.0000\t0.0000\t0.0000"


def test_config_file_and_dump_only(tmp_path):
    cfg = tmp_path / "track.toml"
    cfg.write_text("[smoothing]\nalpha = 0.125\n")
    inp = tmp_path / "bearings.tsv"
    inp.write_text("bearing\n1\n")
    log_dir = tmp_path / "logs"
    proc = run_cli(
        ["smooth", str(inp), "--config", str(cfg), "--dump-effective-config",
         "--log-dir", str(log_dir)],
        cwd=tmp_path,
    )
    assert proc.returncode == 0, proc.stderr
    assert "alpha = 0.125" in proc.stdout
    assert not log_dir.exists()
    assert not (tmp_path / "bearings_smoothed.tsv").exists()


def test_invalid_alpha_exits_2(tmp_path):
    inp = tmp_path / "bearings.tsv"
    inp.write_text("bearing\n1\n")
    proc = run_cli(["smooth", str(inp), "--alpha", "2"], cwd=tmp_path)
    assert proc.returncode == 2
    assert "ERROR: parameter alpha is not in range 0.0 .. 1.0" in proc.stdout


def test_missing_columns_exits_2(tmp_path):
    inp = tmp_path / "track.tsv"
    inp.write_text("lat\tlon\n1\t2\n")
    proc = run_cli(["segments", str(inp), "--log-dir", str(tmp_path / "logs")], cwd=tmp_path)
    assert proc.returncode == 2
    assert "ERROR:" in proc.stdout


def test_scalar_config_section_exits_2(tmp_path):
    inp = tmp_path / "bearings.tsv"
    inp.write_text("bearing\n1\n")
    proc = run_cli(["smooth", str(inp), "--set", "smoothing=5"], cwd=tmp_path)
    assert proc.returncode == 2
    assert "ERROR: [smoothing] must be a table" in proc.stdout
    assert "Traceback" not in proc.stderr
