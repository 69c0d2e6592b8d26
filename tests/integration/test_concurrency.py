import threading
import time
import pytest
from pathlib import Path
from cac.domain.models import OutcomeStatus
from cac.pipeline.executor import ActionExecutor
from cac.pipeline.orchestrator import Orchestrator

pytestmark = pytest.mark.integration


class SlowTranscoder:
    """Fake transcoder that tracks how many conversions overlap."""

    def __init__(self, hold_s: float = 0.03):
        self.hold_s = hold_s
        self.current = 0
        self.peak = 0
        self.calls = 0
        self._lock = threading.Lock()

    def convert(self, input_path: Path, output_path: Path) -> None:
        with self._lock:
            self.current += 1
            self.calls += 1
            self.peak = max(self.peak, self.current)
        time.sleep(self.hold_s)
        output_path.write_bytes(input_path.read_bytes())
        with self._lock:
            self.current -= 1


@pytest.mark.parametrize("workers", [1, 3])
def test_run_never_exceeds_worker_count(make_config, event_bus, test_input_dir, test_output_dir, workers):
    for i in range(12):
        (test_input_dir / f"track{i:02d}.wav").write_text(str(i))
    transcoder = SlowTranscoder()

    summary = Orchestrator(make_config(workers=workers), event_bus, transcoder=transcoder).run()

    assert summary.converted == 12
    assert transcoder.calls == 12
    assert transcoder.peak <= workers
    if workers > 1:
        assert transcoder.peak > 1


def test_walker_does_not_wait_for_each_file(make_config, event_bus, test_input_dir, test_output_dir):
    """All files are dispatched while the first conversions are still running."""
    for i in range(4):
        (test_input_dir / f"t{i}.wav").write_text("x")

    release = threading.Event()
    started = []
    lock = threading.Lock()

    class BlockingTranscoder:
        def convert(self, input_path, output_path):
            with lock:
                started.append(input_path.name)
            release.wait(timeout=5)

    orchestrator = Orchestrator(make_config(workers=4), event_bus, transcoder=BlockingTranscoder())
    result = {}
    runner = threading.Thread(target=lambda: result.setdefault("summary", orchestrator.run()))
    runner.start()

    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        with lock:
            if len(started) == 4:
                break
        time.sleep(0.01)

    with lock:
        assert len(started) == 4
    assert runner.is_alive()  # still joined on the blocked workers

    release.set()
    runner.join(timeout=5)
    assert result["summary"].converted == 4
