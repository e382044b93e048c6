# sandbox/runner.py
"""
Runs the builder image against one workspace.

Each call starts a throwaway `docker run --rm` container with the workspace
bind-mounted at /build, running as the host user so the files it writes in
`dist/` stay deletable by this service. stdout and stderr are drained by two
threads at once; reading one pipe to the end before the other deadlocks as
soon as the container fills the second pipe's buffer.
"""

import logging
import os
import subprocess
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from builder.outcome import BuildError, ErrorKind

logger = logging.getLogger(__name__)

CONTAINER_WORKDIR = "/build"
FALLBACK_UID = 1000
FALLBACK_GID = 1000


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    exit_code: int
    stdout: str
    stderr: str

    @property
    def error(self) -> str:
        if self.stderr.strip():
            return self.stderr
        return f"Container exited with code {self.exit_code}"


def _drain(stream, sink: List[str], label: str) -> None:
    for line in iter(stream.readline, ""):
        sink.append(line)
        logger.debug("%s: %s", label, line.rstrip("\n"))
    stream.close()


def run_streaming(cmd: Sequence[str], label: str) -> ExecutionResult:
    """
    Start `cmd`, collect both output streams while it runs and wait for exit.

    Raises OSError if the process cannot be started at all; every exit code,
    zero or not, comes back as an ExecutionResult.
    """
    proc = subprocess.Popen(
        list(cmd),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        encoding="utf-8",
        errors="replace",
    )
    out: List[str] = []
    err: List[str] = []
    readers = [
        threading.Thread(target=_drain, args=(proc.stdout, out, f"{label} stdout"), daemon=True),
        threading.Thread(target=_drain, args=(proc.stderr, err, f"{label} stderr"), daemon=True),
    ]
    for reader in readers:
        reader.start()
    exit_code = proc.wait()
    for reader in readers:
        reader.join()

    return ExecutionResult(
        success=exit_code == 0,
        exit_code=exit_code,
        stdout="".join(out),
        stderr="".join(err),
    )


def host_identity() -> Tuple[int, int]:
    """uid/gid to run the container as; 1000:1000 where the OS has no such notion."""
    getuid = getattr(os, "getuid", None)
    getgid = getattr(os, "getgid", None)
    uid = getuid() if getuid else FALLBACK_UID
    gid = getgid() if getgid else FALLBACK_GID
    return uid, gid


def mount_spec(host_path: str) -> str:
    """
    `--mount` value binding `host_path` at /build.

    docker parses the value as one CSV record, so the source field is quoted
    when the path holds a comma or quote; colons need no escaping here.
    """
    source = f"source={os.path.abspath(host_path)}"
    if "," in source or '"' in source:
        source = '"' + source.replace('"', '""') + '"'
    return f"type=bind,{source},target={CONTAINER_WORKDIR}"


class DockerRunner:
    def __init__(self, image: str, docker_bin: str = "docker"):
        self.image = image
        self.docker_bin = docker_bin

    def command(self, workspace_path: str) -> List[str]:
        uid, gid = host_identity()
        return [
            self.docker_bin,
            "run",
            "--rm",
            "-u",
            f"{uid}:{gid}",
            "--mount",
            mount_spec(workspace_path),
            self.image,
        ]

    def run(self, workspace_path: str) -> Tuple[Optional[ExecutionResult], Optional[BuildError]]:
        """
        Build one workspace inside a fresh container.

        A container that exits non-zero is still a result (success=False);
        only a runtime that cannot be launched at all yields a LAUNCH_ERROR.
        """
        cmd = self.command(workspace_path)
        logger.info("Starting build container: %s", " ".join(cmd))
        try:
            result = run_streaming(cmd, label="container")
        except OSError as e:
            logger.error("Could not start container runtime %r: %s", self.docker_bin, e)
            return None, BuildError(ErrorKind.LAUNCH_ERROR, f"Failed to start container runtime '{self.docker_bin}': {e}")

        if result.success:
            logger.info("Build container finished successfully")
        else:
            logger.error("Build container failed (code %s): %s", result.exit_code, result.stderr)
        return result, None
