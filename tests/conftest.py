"""Shared fixtures for pipeline_harness tests.

End-to-end tests invoke `python -m pipeline_harness` as a subprocess with a
fake ``docker-compose`` on PATH that records the argv it was given.
"""
import os
import sys
import json
import subprocess
import time
from pathlib import Path

import pytest


PYTHON = sys.executable
TIMEOUT = 30  # seconds
SRC = Path(__file__).resolve().parents[1] / "src"

FAKE_COMPOSE = """\
#!{python}
import json, os, signal, sys, time

def log():
    with open(os.environ["FAKE_COMPOSE_LOG"], "w") as f:
        json.dump({{"argv0": sys.argv[0], "argv": sys.argv[1:], "cwd": os.getcwd()}}, f)

def on_sigint(signum, frame):
    time.sleep(float(os.environ["FAKE_COMPOSE_TRAP"]))
    with open(os.environ["FAKE_COMPOSE_DONE"], "w"):
        pass
    sys.exit(3)

log()
if os.environ.get("FAKE_COMPOSE_TRAP"):
    signal.signal(signal.SIGINT, on_sigint)
    with open(os.environ["FAKE_COMPOSE_READY"], "w"):
        pass
    time.sleep({timeout})
    sys.exit(99)
if os.environ.get("FAKE_COMPOSE_SIGNAL"):
    os.kill(os.getpid(), int(os.environ["FAKE_COMPOSE_SIGNAL"]))
sys.exit(int(os.environ.get("FAKE_COMPOSE_EXIT", "0")))
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Drop harness variables and any user config from the caller's environment."""
    for key in list(os.environ):
        if key.startswith("PIPELINE_TEST_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_compose(tmp_path):
    """A directory holding a fake docker-compose, and the log it writes."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "docker-compose"
    script.write_text(FAKE_COMPOSE.format(python=PYTHON, timeout=TIMEOUT))
    script.chmod(0o755)
    return bin_dir, tmp_path / "compose.json"


def read_log(log_path):
    with open(log_path) as f:
        return json.load(f)


def cli_env(path, env=None):
    """Environment with *path* as the only PATH entry and src/ importable."""
    run_env = os.environ.copy()
    run_env["PATH"] = str(path)
    run_env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(SRC), run_env.get("PYTHONPATH")) if p
    )
    run_env.pop("USER", None)
    if env:
        run_env.update(env)
    return run_env


def run_cli(args, path, env=None, cwd=None):
    """Run ``python -m pipeline_harness`` to completion."""
    return subprocess.run(
        [PYTHON, "-m", "pipeline_harness", *args],
        capture_output=True, text=True,
        timeout=TIMEOUT, env=cli_env(path, env), cwd=cwd,
    )


def start_cli(args, path, env=None):
    """Start ``python -m pipeline_harness`` in its own process group."""
    return subprocess.Popen(
        [PYTHON, "-m", "pipeline_harness", *args],
        stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True,
        env=cli_env(path, env), start_new_session=True,
    )


def wait_for_file(path, timeout=TIMEOUT):
    deadline = time.monotonic() + timeout
    while not os.path.exists(path):
        if time.monotonic() > deadline:
            pytest.fail(f"timed out waiting for {path}")
        time.sleep(0.05)
