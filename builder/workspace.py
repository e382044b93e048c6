# builder/workspace.py
"""
Per-build working directories.

Every build gets its own `build-<id>` directory under the configured root.
The directory is owned by exactly one build from creation until the
background delete started by destroy_workspace() removes it.
"""

import logging
import os
import shutil
import threading
from typing import Optional, Tuple

from builder.outcome import BuildError, ErrorKind
from builder.scaffold import ENTRY_FILE, render_scaffold

logger = logging.getLogger(__name__)


class WorkspaceManager:
    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def create_workspace(self, build_id: str) -> Tuple[Optional[str], Optional[BuildError]]:
        """
        Create `<root>/build-<build_id>/src`.

        exist_ok is False for the build directory itself so a reused id fails
        instead of silently sharing another build's files. A directory this
        call did create is removed again if a later step fails.
        """
        path = os.path.join(self.root, f"build-{build_id}")
        created = False
        try:
            os.makedirs(self.root, exist_ok=True)
            os.mkdir(path)
            created = True
            os.mkdir(os.path.join(path, "src"))
        except OSError as e:
            logger.error("Failed to create workspace %s: %s", path, e)
            if created:
                _remove_tree(path)
            return None, BuildError(ErrorKind.FILESYSTEM_ERROR, f"Could not create workspace {path}: {e}")
        logger.debug("Created workspace %s", path)
        return path, None

    def write_source(self, path: str, content: str) -> Optional[BuildError]:
        target = os.path.join(path, *ENTRY_FILE.split("/"))
        try:
            # newline="" keeps the caller's line endings untouched
            with open(target, "w", encoding="utf-8", newline="") as fh:
                fh.write(content)
        except (OSError, UnicodeError) as e:
            logger.error("Failed to write source %s: %s", target, e)
            return BuildError(ErrorKind.FILESYSTEM_ERROR, f"Could not write source file {target}: {e}")
        return None

    def write_scaffold(self, path: str) -> Optional[BuildError]:
        for name, content in render_scaffold().items():
            target = os.path.join(path, name)
            try:
                with open(target, "w", encoding="utf-8", newline="") as fh:
                    fh.write(content)
            except OSError as e:
                logger.error("Failed to write scaffold file %s: %s", target, e)
                return BuildError(ErrorKind.FILESYSTEM_ERROR, f"Could not write scaffold file {target}: {e}")
        return None

    def destroy_workspace(self, path: str) -> Optional[threading.Thread]:
        """
        Delete the workspace in a daemon thread and return immediately.

        Errors are logged and go nowhere else; this never raises. The thread
        handle is returned for callers that want to wait (tests); request
        handlers ignore it. When no thread can be started the tree is removed
        inline and None is returned.
        """
        worker = threading.Thread(
            target=_remove_tree,
            args=(path,),
            name=f"cleanup-{os.path.basename(path)}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as e:
            logger.error("Could not start cleanup thread for %s (%s); deleting inline", path, e)
            _remove_tree(path)
            return None
        return worker


def _remove_tree(path: str) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except Exception:
        logger.exception("Failed to delete workspace %s", path)
    else:
        logger.debug("Deleted workspace %s", path)
