"""
Shared fixtures: a substitute runner that never starts a container, and a
factory for fake `docker` executables used to exercise the process boundary.
"""

import os
import stat
import sys
import time
from pathlib import Path

import pytest

from builder.outcome import BuildError, ErrorKind
from builder.workspace import WorkspaceManager
from builder.orchestrator import BuildOrchestrator
from sandbox.runner import ExecutionResult


def bundle_for(source: str) -> str:
    return f'var ArtifactApp=function(){{"use strict";{source}}}();\n'


class FakeRunner:
    """
    Behaves like DockerRunner.run without Docker: on success it reads the
    workspace source and writes a bundle to dist/artifact.iife.js.
    """

    def __init__(self, exit_code=0, stderr="", write_artifact=True, launch_error=False, delay=0.0):
        self.exit_code = exit_code
        self.stderr = stderr
        self.write_artifact = write_artifact
        self.launch_error = launch_error
        self.delay = delay
        self.calls = []

    def run(self, workspace_path):
        self.calls.append(workspace_path)
        if self.launch_error:
            return None, BuildError(ErrorKind.LAUNCH_ERROR, "Failed to start container runtime 'docker': not found")
        if self.delay:
            time.sleep(self.delay)
        if self.exit_code != 0:
            return ExecutionResult(success=False, exit_code=self.exit_code, stdout="", stderr=self.stderr), None

        if self.write_artifact:
            ws = Path(workspace_path)
            source = (ws / "src" / "main.jsx").read_text(encoding="utf-8")
            (ws / "dist").mkdir(exist_ok=True)
            (ws / "dist" / "artifact.iife.js").write_text(bundle_for(source), encoding="utf-8")
        return ExecutionResult(success=True, exit_code=0, stdout="built in 0.1s\n", stderr=""), None


@pytest.fixture
def build_root(tmp_path):
    return tmp_path / "builds"


@pytest.fixture
def workspaces(build_root):
    return WorkspaceManager(str(build_root))


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def orchestrator(workspaces, fake_runner):
    return BuildOrchestrator(workspaces=workspaces, runner=fake_runner)


@pytest.fixture
def wait_for():
    """Poll `predicate` until it is true or `timeout` seconds pass."""

    def _wait(predicate, timeout=5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.02)
        return predicate()

    return _wait


@pytest.fixture
def fake_docker(tmp_path):
    """
    Write an executable Python script standing in for the docker binary.
    The script body sees the docker arguments in `args` (sys.argv[1:]).
    """
    counter = {"n": 0}

    def _make(body: str) -> str:
        counter["n"] += 1
        path = tmp_path / f"fake-docker-{counter['n']}"
        path.write_text(
            f"#!{sys.executable}\nimport os, sys\nargs = sys.argv[1:]\n{body}\n",
            encoding="utf-8",
        )
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make


@pytest.fixture
def missing_binary(tmp_path):
    return os.path.join(str(tmp_path), "no-such-docker")
