from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cac.domain.events import RunFinished, RunStarted
from cac.domain.models import RunSummary
from cac.infrastructure.event_bus import EventBus


class ConsoleReporter:
    """Subscribes to EventBus and prints the run header and final summary.

    In quiet mode the header is suppressed and the summary is only printed when
    something failed.
    """

    def __init__(self, bus: EventBus, console: Console = None, quiet: bool = False):
        self.bus = bus
        self.console = console or Console()
        self.quiet = quiet
        self.summary: RunSummary = None
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        self.bus.subscribe(RunStarted, self.on_run_started)
        self.bus.subscribe(RunFinished, self.on_run_finished)

    def on_run_started(self, event: RunStarted):
        if self.quiet:
            return
        lines = [
            f"Source: {event.source_dir if event.source_dir is not None else '(file list)'}",
            f"Output: {event.output_dir}",
            f"Target extension: {event.target_extension}",
            f"Workers: {event.workers}",
        ]
        self.console.print(Panel("\n".join(lines), title="cac", expand=False))

    def on_run_finished(self, event: RunFinished):
        self.summary = event.summary
        if self.quiet and event.summary.ok:
            return
        self.print_summary(event.summary)

    def print_summary(self, summary: RunSummary):
        table = Table(title="Conversion summary", show_header=True, header_style="bold")
        table.add_column("Outcome")
        table.add_column("Files", justify="right")
        table.add_row("Converted", str(summary.converted))
        table.add_row("Moved/copied", str(summary.relocated))
        table.add_row("Skipped", str(summary.skipped))
        table.add_row(Text("Failed", style="red" if summary.failed else ""), str(summary.failed))
        table.add_row(Text("Total", style="bold"), str(summary.total))
        self.console.print(table)

        if summary.errors:
            errors = Table(title=f"Errors ({len(summary.errors)})", show_header=True, header_style="bold red")
            errors.add_column("#", justify="right")
            errors.add_column("Path", overflow="fold")
            errors.add_column("Kind")
            errors.add_column("Error", overflow="fold")
            for idx, err in enumerate(summary.errors, start=1):
                errors.add_row(str(idx), str(err.path), err.kind, err.message)
            self.console.print(errors)
            self.console.print(Text(f"completed with {len(summary.errors)} errors", style="bold red"))
        else:
            self.console.print(Text("✓ all conversions completed successfully!", style="bold green"))
