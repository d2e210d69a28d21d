from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
SCRIPT_PATH = REPO_ROOT / "scripts" / "check_config.py"


def _run_script(*args: str) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT / "api"), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, str(SCRIPT_PATH), *args],
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )


def test_check_config_summarizes_example_files() -> None:
    completed = _run_script(
        "--merge",
        str(REPO_ROOT / "config" / "merge.example.yml"),
        "--categories",
        str(REPO_ROOT / "config" / "categories.example.yml"),
    )

    assert completed.returncode == 0, completed.stderr
    assert "merge groups: 1" in completed.stdout
    assert "  jane-doe: 100 <- 101, 102, 103" in completed.stdout
    assert "  featured (aggregate): 12" in completed.stdout


def test_check_config_fails_on_conflicting_groups(tmp_path: Path) -> None:
    merge_path = tmp_path / "merge.yml"
    merge_path.write_text("a:\n  to: 1\n  from: [5]\nb:\n  to: 2\n  include: [5]\n", encoding="utf-8")

    completed = _run_script("--merge", str(merge_path))

    assert completed.returncode == 1
    assert "configuration error" in completed.stderr
