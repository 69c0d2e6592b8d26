"""Rendering and running the external transcoder command.

The template is split into arguments first and the placeholders are filled in
per argument afterwards, so an input or output path containing spaces or quotes
always ends up as exactly one argv entry.
"""

import logging
import shlex
import shutil
import subprocess
import string
from pathlib import Path
from typing import List, Union

from cac.domain.errors import ConfigError, ExecutionError, TemplateError

PLACEHOLDERS = ("input", "output")

_formatter = string.Formatter()


def _check_fields(token: str, template: str) -> None:
    try:
        parsed = list(_formatter.parse(token))
    except ValueError as exc:
        raise TemplateError(f"Malformed command template {template!r}: {exc}") from exc
    for _literal, field_name, format_spec, conversion in parsed:
        if field_name is None:
            continue
        if field_name not in PLACEHOLDERS:
            raise TemplateError(
                f"Unknown placeholder {{{field_name}}} in command template {template!r}; "
                f"use {{input}} and {{output}}"
            )
        if format_spec or conversion:
            raise TemplateError(f"Placeholder {{{field_name}}} must not carry a format spec or conversion")


def render(template: str, input_path: Union[str, Path], output_path: Union[str, Path]) -> List[str]:
    """Builds the argv for one conversion.

    >>> render('ffmpeg -y -i "{input}" "{output}"', "a b.wav", "out/a b.mp3")
    ['ffmpeg', '-y', '-i', 'a b.wav', 'out/a b.mp3']
    """
    try:
        tokens = shlex.split(template)
    except ValueError as exc:
        raise TemplateError(f"Malformed command template {template!r}: {exc}") from exc

    if not tokens:
        raise TemplateError(f"Invalid command: {template!r}")

    fields = {"input": str(input_path), "output": str(output_path)}
    argv = []
    for token in tokens:
        _check_fields(token, template)
        argv.append(token.format_map(fields))
    return argv


class TranscoderAdapter:
    """Runs the configured command template for a single input/output pair."""

    def __init__(self, template: str, quiet: bool = False):
        self.template = template
        self.quiet = quiet
        self.logger = logging.getLogger(__name__)

    def ensure_available(self) -> None:
        """Fails early when the template's program is not on PATH.

        A template that cannot be rendered is left alone here; it fails per file.
        """
        try:
            program = render(self.template, "input", "output")[0]
        except TemplateError:
            return
        if shutil.which(program) is None:
            raise ConfigError(f"{program} binary not found in PATH")

    def convert(self, input_path: Path, output_path: Path) -> None:
        cmd = render(self.template, input_path, output_path)
        self.logger.debug(f"COMMAND: {shlex.join(cmd)}")

        try:
            if self.quiet:
                result = subprocess.run(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    text=True,
                    errors="replace",
                )
            else:
                result = subprocess.run(cmd, stdin=subprocess.DEVNULL)
        except OSError as exc:
            raise ExecutionError(f"failed to run {cmd[0]} for {input_path}: {exc}", path=input_path) from exc

        if result.returncode != 0:
            message = f"failed to convert {input_path}: {cmd[0]} exited with status {result.returncode}"
            stderr_lines = (result.stderr or "").strip().splitlines() if self.quiet else []
            if stderr_lines:
                message = f"{message} ({stderr_lines[-1].strip()})"
            raise ExecutionError(message, path=input_path)
