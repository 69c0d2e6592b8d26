from pathlib import Path
from rich.console import Console
from cac.domain.events import RunFinished, RunStarted
from cac.domain.models import FileError, RunSummary
from cac.ui.reporter import ConsoleReporter


def _reporter(event_bus, quiet=False):
    console = Console(record=True, width=120, force_terminal=False)
    return ConsoleReporter(event_bus, console=console, quiet=quiet), console


def test_prints_header_and_summary(event_bus):
    reporter, console = _reporter(event_bus)

    event_bus.publish(RunStarted(source_dir=Path("music"), output_dir=Path("out"), target_extension=".mp3", workers=4))
    event_bus.publish(RunFinished(summary=RunSummary(converted=3, relocated=1, skipped=2)))

    text = console.export_text()
    assert "Target extension: .mp3" in text
    assert "Workers: 4" in text
    assert "Converted" in text
    assert "Total" in text
    assert "all conversions completed successfully" in text
    assert reporter.summary.total == 6


def test_prints_errors(event_bus):
    _, console = _reporter(event_bus)
    summary = RunSummary(
        converted=1,
        failed=1,
        errors=[FileError(path=Path("bad.wav"), kind="ExecutionError", message="ffmpeg exited with status 1")],
    )

    event_bus.publish(RunFinished(summary=summary))

    text = console.export_text()
    assert "bad.wav" in text
    assert "ExecutionError" in text
    assert "completed with 1 errors" in text


def test_quiet_success_prints_nothing(event_bus):
    _, console = _reporter(event_bus, quiet=True)

    event_bus.publish(RunStarted(source_dir=Path("music"), output_dir=Path("out"), target_extension=".mp3", workers=4))
    event_bus.publish(RunFinished(summary=RunSummary(converted=3)))

    assert console.export_text() == ""


def test_quiet_failure_still_prints_summary(event_bus):
    _, console = _reporter(event_bus, quiet=True)
    summary = RunSummary(failed=1, errors=[FileError(path=Path("x"), kind="TraversalError", message="denied")])

    event_bus.publish(RunFinished(summary=summary))

    text = console.export_text()
    assert "Failed" in text
    assert "denied" in text
