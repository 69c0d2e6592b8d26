import os
from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_COMMAND = 'ffmpeg -y -i "{input}" "{output}"'
DEFAULT_TARGET_EXTENSION = ".mp3"


def default_workers() -> int:
    return os.cpu_count() or 1


def normalize_extension(ext: str) -> str:
    ext = ext.strip()
    if not ext:
        return ext
    return ext if ext.startswith(".") else f".{ext}"


def parse_extension_list(values: Union[None, str, List[str]]) -> List[str]:
    """Flattens repeated and/or comma-separated extension values.

    ["mp3, .wav", ".ogg"] -> [".mp3", ".wav", ".ogg"]
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    result: List[str] = []
    for value in values:
        for part in str(value).split(","):
            ext = normalize_extension(part)
            if ext and ext not in result:
                result.append(ext)
    return result


class JobConfig(BaseModel):
    """Immutable settings for a single run."""

    model_config = ConfigDict(frozen=True)

    source_dir: Optional[Path] = None
    files: List[Path] = Field(default_factory=list)
    output_dir: Path = Path(".")
    target_extension: str = DEFAULT_TARGET_EXTENSION
    sources: List[str] = Field(default_factory=list)
    excepts: List[str] = Field(default_factory=list)
    delete_original: bool = False
    create_output_dir: bool = False
    quiet: bool = False
    debug: bool = False
    command: str = DEFAULT_COMMAND
    workers: int = Field(default_factory=default_workers, gt=0)
    log_path: Optional[Path] = None

    @field_validator("target_extension", mode="before")
    @classmethod
    def validate_target_extension(cls, v: str) -> str:
        ext = normalize_extension(str(v or ""))
        if not ext or ext == ".":
            raise ValueError("target extension cannot be empty")
        return ext

    @field_validator("sources", "excepts", mode="before")
    @classmethod
    def validate_extension_list(cls, v):
        return parse_extension_list(v)

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command template cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_inputs(self):
        if self.source_dir is None and not self.files:
            raise ValueError("a source directory or at least one file is required")
        return self
