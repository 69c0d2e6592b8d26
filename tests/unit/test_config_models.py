import pytest
from pathlib import Path
from pydantic import ValidationError
from cac.config.models import (
    JobConfig, DEFAULT_COMMAND, parse_extension_list, normalize_extension, default_workers,
)


def test_parse_extension_list_splits_commas_and_adds_dots():
    assert parse_extension_list(["mp3, .wav", ".ogg"]) == [".mp3", ".wav", ".ogg"]


def test_parse_extension_list_drops_empty_and_duplicates():
    assert parse_extension_list(" .wav,, wav ,") == [".wav"]
    assert parse_extension_list(None) == []


def test_normalize_extension():
    assert normalize_extension(" flac ") == ".flac"
    assert normalize_extension(".flac") == ".flac"
    assert normalize_extension("") == ""


def test_job_config_defaults():
    config = JobConfig(source_dir=Path("music"))
    assert config.target_extension == ".mp3"
    assert config.output_dir == Path(".")
    assert config.command == DEFAULT_COMMAND
    assert config.workers == default_workers()
    assert config.sources == []
    assert config.excepts == []
    assert config.delete_original is False
    assert config.create_output_dir is False


def test_job_config_normalizes_lists():
    config = JobConfig(source_dir=Path("music"), target_extension="ogg", sources="wav,flac", excepts=["txt"])
    assert config.target_extension == ".ogg"
    assert config.sources == [".wav", ".flac"]
    assert config.excepts == [".txt"]


def test_job_config_is_immutable():
    config = JobConfig(source_dir=Path("music"))
    with pytest.raises(ValidationError):
        config.delete_original = True


def test_job_config_requires_input():
    with pytest.raises(ValidationError, match="source directory or at least one file"):
        JobConfig()


def test_job_config_accepts_files_only():
    config = JobConfig(files=[Path("a.wav")])
    assert config.source_dir is None
    assert config.files == [Path("a.wav")]


@pytest.mark.parametrize("target", ["", "  ", "."])
def test_job_config_rejects_empty_target(target):
    with pytest.raises(ValidationError):
        JobConfig(source_dir=Path("music"), target_extension=target)


def test_job_config_rejects_bad_workers_and_command():
    with pytest.raises(ValidationError):
        JobConfig(source_dir=Path("music"), workers=0)
    with pytest.raises(ValidationError):
        JobConfig(source_dir=Path("music"), command="   ")
