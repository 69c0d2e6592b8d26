import logging
import sys
import pytest
from pathlib import Path
from cac.config.models import JobConfig
from cac.infrastructure.event_bus import EventBus

# ============================================================================
# Command template fixtures (a Python one-liner stands in for ffmpeg)
# ============================================================================

PYTHON = f'"{sys.executable}"'

COPY_COMMAND = (
    f'{PYTHON} -c "import shutil, sys; shutil.copyfile(sys.argv[1], sys.argv[2])" '
    '"{input}" "{output}"'
)

FAIL_COMMAND = f'{PYTHON} -c "import sys; sys.exit(\'converter exploded\')" "{{input}}" "{{output}}"'

# Fails for any input whose name contains "bad", copies otherwise
SELECTIVE_COMMAND = (
    f'{PYTHON} -c "import os, shutil, sys; '
    "sys.exit('bad input') if 'bad' in os.path.basename(sys.argv[1]) else shutil.copyfile(sys.argv[1], sys.argv[2])\" "
    '"{input}" "{output}"'
)


@pytest.fixture
def copy_command():
    return COPY_COMMAND


@pytest.fixture
def fail_command():
    return FAIL_COMMAND


@pytest.fixture
def selective_command():
    return SELECTIVE_COMMAND

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def make_config(test_input_dir, test_output_dir):
    """Factory for JobConfig objects rooted at the test directories."""
    def _make(**overrides):
        values = {
            "source_dir": test_input_dir,
            "output_dir": test_output_dir,
            "target_extension": ".mp3",
            "command": COPY_COMMAND,
            "workers": 2,
            "quiet": True,
        }
        values.update(overrides)
        return JobConfig(**values)
    return _make

# ============================================================================
# Logging Fixtures
# ============================================================================

@pytest.fixture
def restore_root_logger():
    """Undoes setup_logging(force=True) so handlers do not leak between tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def test_input_dir(tmp_path):
    """Creates a test input directory."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir

@pytest.fixture
def test_output_dir(tmp_path):
    """Creates a test output directory."""
    output_dir = tmp_path / "converted"
    output_dir.mkdir()
    return output_dir

@pytest.fixture
def dummy_audio_files(test_input_dir):
    """Creates a small mixed tree: a.wav, b.mp3, c.txt and album/d.flac."""
    files = {}
    for name in ("a.wav", "b.mp3", "c.txt"):
        f = test_input_dir / name
        f.write_bytes(f"dummy {name} content ".encode() * 50)
        files[name] = f

    subdir = test_input_dir / "album"
    subdir.mkdir()
    f = subdir / "d.flac"
    f.write_bytes(b"dummy flac content " * 50)
    files["d.flac"] = f

    return files


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
