import typer
from pathlib import Path
from typing import Optional, List

from pydantic import ValidationError

from cac.config.loader import load_config, build_job_config
from cac.config.models import DEFAULT_COMMAND, DEFAULT_TARGET_EXTENSION
from cac.domain.errors import ConfigError
from cac.infrastructure.logging import setup_logging
from cac.infrastructure.event_bus import EventBus
from cac.infrastructure.command import TranscoderAdapter
from cac.pipeline.orchestrator import Orchestrator
from cac.ui.reporter import ConsoleReporter

app = typer.Typer(help="cac - conveniently convert files in batch using ffmpeg (or any command)")


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


@app.command()
def convert(
    source_dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Convert files in DIRECTORY (recursively)"),
    files: Optional[List[Path]] = typer.Option(None, "--files", "-f", help="Convert FILES (repeatable)"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help=f"Convert files to target extension (default: {DEFAULT_TARGET_EXTENSION})"),
    excepts: Optional[List[str]] = typer.Option(None, "--except", "-e", help="Do not convert files with these extensions (repeatable or comma-separated)"),
    sources: Optional[List[str]] = typer.Option(None, "--sources", "-s", help="Only convert files with these extensions (takes precedence over --except)"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o", help="Output directory of processed files (default: .)"),
    create_out_dir: bool = typer.Option(False, "--create-out-dir", "-c", help="Create output directory if it does not exist"),
    delete: bool = typer.Option(False, "--delete", "-D", help="Delete original files after converting/moving"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show error logs"),
    command: Optional[str] = typer.Option(None, "--command", help=f"Convert command template with {{input}}/{{output}} placeholders (default: {DEFAULT_COMMAND})"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Number of parallel workers (default: CPU count)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to YAML config"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Also write logs to this file"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging"),
):
    """Convert or relocate every matching file in a directory tree."""
    try:
        file_data = load_config(config_path) if config_path is not None else {}
        config = build_job_config(
            file_data,
            source_dir=source_dir,
            files=list(files) if files else None,
            target_extension=target,
            excepts=list(excepts) if excepts else None,
            sources=list(sources) if sources else None,
            output_dir=out_dir,
            create_output_dir=True if create_out_dir else None,
            delete_original=True if delete else None,
            quiet=True if quiet else None,
            debug=True if debug else None,
            command=command,
            workers=workers,
            log_path=log_path,
        )
    except ConfigError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.secho(f"Error: invalid configuration: {_format_validation_error(exc)}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    logger = setup_logging(debug=config.debug, quiet=config.quiet, log_path=config.log_path)
    logger.info(
        f"Config: workers={config.workers}, target={config.target_extension}, "
        f"delete={config.delete_original}, quiet={config.quiet}, debug={config.debug}"
    )

    bus = EventBus()
    ConsoleReporter(bus, quiet=config.quiet)
    transcoder = TranscoderAdapter(config.command, quiet=config.quiet)

    try:
        transcoder.ensure_available()
        orchestrator = Orchestrator(config=config, event_bus=bus, transcoder=transcoder)
        summary = orchestrator.run()
    except ConfigError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        typer.secho("\nConversion stopped by user (Ctrl+C)", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if not summary.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
