from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Decision(str, Enum):
    CONVERT = "CONVERT"
    RELOCATE = "RELOCATE"
    SKIP = "SKIP"


class OutcomeStatus(str, Enum):
    CONVERTED = "CONVERTED"
    RELOCATED = "RELOCATED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class FileCandidate(BaseModel):
    """One filesystem entry encountered during traversal."""

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str
    extension: str

    @property
    def stem(self) -> str:
        if self.extension and self.name.endswith(self.extension):
            return self.name[: -len(self.extension)]
        return self.name

    @classmethod
    def from_path(cls, path: Path) -> "FileCandidate":
        """Extension runs from the last dot of the name, so ".mp3" is all extension."""
        path = Path(path)
        dot = path.name.rfind(".")
        extension = path.name[dot:] if dot >= 0 else ""
        return cls(path=path, name=path.name, extension=extension)


class ActionOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    status: OutcomeStatus
    output_path: Optional[Path] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def failed(cls, path: Path, error: Exception, output_path: Optional[Path] = None) -> "ActionOutcome":
        kind = getattr(error, "kind", type(error).__name__)
        return cls(
            path=path,
            status=OutcomeStatus.FAILED,
            output_path=output_path,
            error_kind=kind,
            error_message=str(error),
        )


class FileError(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    kind: str
    message: str


class RunSummary(BaseModel):
    """Final, immutable result of a run (counters plus errors in completion order)."""

    model_config = ConfigDict(frozen=True)

    converted: int = 0
    relocated: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[FileError] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.converted + self.relocated + self.skipped + self.failed

    @property
    def ok(self) -> bool:
        return self.failed == 0
