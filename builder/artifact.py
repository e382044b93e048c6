# builder/artifact.py
import logging
import os
from typing import Optional, Tuple

from builder.outcome import BuildError, ErrorKind
from builder.scaffold import ARTIFACT_FILE, OUTPUT_DIR

logger = logging.getLogger(__name__)


def artifact_path(workspace_path: str) -> str:
    return os.path.join(workspace_path, OUTPUT_DIR, ARTIFACT_FILE)


def extract_artifact(workspace_path: str) -> Tuple[Optional[str], Optional[BuildError]]:
    """
    Read the bundle the container left in `dist/`. The text is returned as-is;
    whether it is valid JavaScript is the toolchain's business.
    """
    path = artifact_path(workspace_path)
    logger.info("Reading artifact %s", path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read(), None
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read artifact %s: %s", path, e)
        return None, BuildError(ErrorKind.ARTIFACT_MISSING, f"Could not read artifact file {path}")
