# builder/orchestrator.py
"""
Turns a piece of untrusted component source into a bundle or a failure.

One call runs strictly in order:

    INIT -> WORKSPACE_CREATED -> SOURCE_WRITTEN -> SCAFFOLD_WRITTEN
         -> EXECUTED -> ARTIFACT_READ -> SUCCESS | FAILED

The first error skips the remaining stages. Whatever stage a run stops at,
the workspace is handed to the background cleanup once the outcome exists.
Calls share no state, so any number may run at once from request threads.
"""

import logging
import uuid
from enum import Enum
from typing import Optional, Tuple

from builder.artifact import extract_artifact
from builder.outcome import (
    Artifact,
    BuildError,
    BuildFailure,
    BuildOutcome,
    BuildSuccess,
    ErrorKind,
)
from builder.workspace import WorkspaceManager

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to build artifact"
TOOLCHAIN_FAILURE_MESSAGE = "Vite build error"
TOOLCHAIN_MARKER = "vite"
ERROR_MARKERS = ("ERROR", "Error")


class BuildStage(str, Enum):
    INIT = "INIT"
    WORKSPACE_CREATED = "WORKSPACE_CREATED"
    SOURCE_WRITTEN = "SOURCE_WRITTEN"
    SCAFFOLD_WRITTEN = "SCAFFOLD_WRITTEN"
    EXECUTED = "EXECUTED"
    ARTIFACT_READ = "ARTIFACT_READ"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


def classify(details: str) -> Tuple[str, str, str]:
    """
    Map failure details to (message, errorType, details) for the caller.

    When the toolchain's name shows up in the text, the message says so and
    details keep only the lines carrying an error marker (if there are any).
    errorType stays BUILD_ERROR either way.
    """
    message = DEFAULT_FAILURE_MESSAGE
    if TOOLCHAIN_MARKER in details.lower():
        message = TOOLCHAIN_FAILURE_MESSAGE
        error_lines = [
            line for line in details.split("\n")
            if any(marker in line for marker in ERROR_MARKERS)
        ]
        if error_lines:
            details = "\n".join(error_lines)
    return message, ErrorKind.BUILD_ERROR.value, details


def _failure_details(error: BuildError) -> str:
    if error.kind is ErrorKind.EXECUTION_ERROR:
        return f"Build execution failed: {error.message}"
    return str(error)


class BuildOrchestrator:
    def __init__(self, workspaces: WorkspaceManager, runner):
        self.workspaces = workspaces
        self.runner = runner

    def build_artifact(self, source_code: str) -> BuildOutcome:
        """
        Build `source_code` (already validated as a non-empty string).

        Expected failures come back as BuildFailure; anything raised from here
        is a bug and is left for the HTTP layer to report.
        """
        build_id = uuid.uuid4().hex
        workspace: Optional[str] = None
        stage = BuildStage.INIT
        logger.info("Build %s started", build_id)

        try:
            workspace, error = self.workspaces.create_workspace(build_id)
            if error is None:
                stage = BuildStage.WORKSPACE_CREATED
                error = self.workspaces.write_source(workspace, source_code)
            if error is None:
                stage = BuildStage.SOURCE_WRITTEN
                error = self.workspaces.write_scaffold(workspace)
            if error is None:
                stage = BuildStage.SCAFFOLD_WRITTEN
                error = self._execute(workspace)
            content = None
            if error is None:
                stage = BuildStage.EXECUTED
                content, error = extract_artifact(workspace)

            if error is not None:
                outcome = self._fail(build_id, stage, error)
            else:
                outcome = BuildSuccess(artifact=Artifact(content=content))
                logger.info("Build %s succeeded (%d bytes)", build_id, len(content))
            return outcome
        finally:
            if workspace is not None:
                self.workspaces.destroy_workspace(workspace)

    def _execute(self, workspace: str) -> Optional[BuildError]:
        result, error = self.runner.run(workspace)
        if error is not None:
            return error
        if not result.success:
            return BuildError(ErrorKind.EXECUTION_ERROR, result.error)
        return None

    def _fail(self, build_id: str, stage: BuildStage, error: BuildError) -> BuildFailure:
        logger.error("Build %s failed after %s: %s", build_id, stage.value, error)
        message, error_type, details = classify(_failure_details(error))
        return BuildFailure(
            error=message,
            error_type=error_type,
            details=details,
            cause=error.kind,
        )
