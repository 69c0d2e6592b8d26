"""Error taxonomy for a conversion run.

Only ConfigError is fatal to the whole run. The other kinds are captured per
file, tagged with the offending path and funnelled into the ResultAggregator.
"""

from pathlib import Path
from typing import Optional, Union


class CacError(Exception):
    """Base class for all errors raised by cac."""

    kind = "CacError"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None


class ConfigError(CacError):
    """Bad or missing required paths/settings. Aborts before traversal."""

    kind = "ConfigError"


class TraversalError(CacError):
    """A directory entry could not be read during traversal."""

    kind = "TraversalError"


class ExecutionError(CacError):
    """Transcode, copy, rename or delete failed for a single file."""

    kind = "ExecutionError"


class TemplateError(CacError):
    """The command template could not be rendered into an argv list."""

    kind = "TemplateError"
