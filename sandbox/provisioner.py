# sandbox/provisioner.py
"""
Builds the builder image once at startup. The server does not listen until
this has succeeded.
"""

import logging
from typing import Optional, Tuple

from sandbox.runner import run_streaming

logger = logging.getLogger(__name__)


def provision_image(image: str, context_dir: str, docker_bin: str = "docker") -> Tuple[bool, Optional[str]]:
    """
    Run `docker build -t <image> <context_dir>`.

    Returns (True, None) on success, otherwise (False, "<error message>").
    """
    cmd = [docker_bin, "build", "-t", image, context_dir]
    logger.info("Building container image: %s", " ".join(cmd))
    try:
        result = run_streaming(cmd, label="image build")
    except OSError as e:
        logger.error("Could not start image build: %s", e)
        return False, f"Failed to start image build with '{docker_bin}': {e}"

    if not result.success:
        if result.stderr.strip():
            message = result.stderr.strip()
        else:
            message = f"Image build exited with code {result.exit_code}"
        logger.error("Image build failed (code %s): %s", result.exit_code, message)
        return False, message

    logger.info("Container image %s is ready", image)
    return True, None
