import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent

STALLED_HASH_SESSION = """
import sys
import time

from filemanager import cli, fs_ops


def _stalled_hash(path, algorithm, chunk_size):
    time.sleep(30)
    return ""


fs_ops._hash_sync = _stalled_hash
sys.exit(cli.main(["--username=tester"]))
"""


def _child_env(home: Path) -> dict:
    env = dict(os.environ)
    env["HOME"] = str(home)
    env["FILEMANAGER_CONFIG"] = str(home / "missing.yaml")
    env["PYTHONUNBUFFERED"] = "1"
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(REPO_ROOT), os.environ.get("PYTHONPATH", "")) if p)
    return env


@pytest.mark.skipif(os.name != "posix", reason="needs POSIX signals")
def test_interrupt_closes_session_while_operation_is_stalled(tmp_path):
    (tmp_path / "a.txt").write_text("payload", encoding="utf-8")
    proc = subprocess.Popen(
        [sys.executable, "-c", STALLED_HASH_SESSION],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=_child_env(tmp_path),
        cwd=tmp_path,
        text=True,
    )
    try:
        seen = []
        while True:
            line = proc.stdout.readline()
            if not line:
                break
            seen.append(line)
            if "You are currently in" in line:
                break
        assert any("Welcome to the File Manager, tester!" in ln for ln in seen), proc.stderr.read()

        proc.stdin.write("hash a.txt\n")
        proc.stdin.flush()
        time.sleep(1.0)

        sent = time.monotonic()
        proc.send_signal(signal.SIGINT)
        returncode = proc.wait(timeout=15)
        elapsed = time.monotonic() - sent
        out = proc.stdout.read()
        err = proc.stderr.read()
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        for stream in (proc.stdin, proc.stdout, proc.stderr):
            try:
                stream.close()
            except (OSError, ValueError):
                pass

    assert elapsed < 10, f"close took {elapsed:.1f}s after SIGINT"
    assert returncode == 0, err
    assert "Thank you for using File Manager, tester, goodbye!" in out
