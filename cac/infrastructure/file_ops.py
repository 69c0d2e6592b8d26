import os
import shutil
import stat
from pathlib import Path

from cac.domain.errors import ExecutionError


def copy_file(src: Path, dst: Path) -> None:
    """Copies src to dst preserving permission bits. Only regular files are accepted."""
    try:
        src_stat = os.stat(src)
    except OSError as exc:
        raise ExecutionError(f"failed to copy file {src}: {exc}", path=src) from exc

    if not stat.S_ISREG(src_stat.st_mode):
        raise ExecutionError(f"{src} is not a regular file", path=src)

    try:
        shutil.copyfile(src, dst)
        shutil.copymode(src, dst)
    except OSError as exc:
        raise ExecutionError(f"failed to copy file {src}: {exc}", path=src) from exc


def move_file(src: Path, dst: Path) -> None:
    """Atomic rename; fails across filesystems instead of falling back to copy."""
    try:
        os.rename(src, dst)
    except OSError as exc:
        raise ExecutionError(f"failed to move file {src}: {exc}", path=src) from exc


def remove_file(path: Path) -> None:
    try:
        os.remove(path)
    except OSError as exc:
        raise ExecutionError(f"failed to delete original file {path}: {exc}", path=path) from exc
