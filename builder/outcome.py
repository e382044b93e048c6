# builder/outcome.py
"""
Result values passed between the build components and the HTTP layer.

Components never raise for expected failures; they hand back a BuildError
next to (or instead of) their value, and the orchestrator folds the first one
it sees into a BuildFailure.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BUILD_ERROR = "BUILD_ERROR"
    SYSTEM_ERROR = "SYSTEM_ERROR"
    # internal causes, folded into BUILD_ERROR details
    FILESYSTEM_ERROR = "FILESYSTEM_ERROR"
    LAUNCH_ERROR = "LAUNCH_ERROR"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    ARTIFACT_MISSING = "ARTIFACT_MISSING"


@dataclass(frozen=True)
class BuildError:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Artifact:
    content: str
    type: str = "jsBundle"

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "content": self.content}


@dataclass(frozen=True)
class BuildSuccess:
    artifact: Artifact
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "artifact": self.artifact.to_dict()}


@dataclass(frozen=True)
class BuildFailure:
    error: str
    error_type: str
    details: str
    cause: Optional[ErrorKind] = None
    success: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.error,
            "errorType": self.error_type,
            "details": self.details,
        }


BuildOutcome = Union[BuildSuccess, BuildFailure]
