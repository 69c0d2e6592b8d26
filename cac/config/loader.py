import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from cac.domain.errors import ConfigError
from .models import JobConfig

# YAML keys that differ from JobConfig field names
_KEY_ALIASES = {
    "dir": "source_dir",
    "out_dir": "output_dir",
    "target": "target_extension",
    "except": "excepts",
    "delete": "delete_original",
    "create_out_dir": "create_output_dir",
}


def load_config(config_path: Path) -> Dict[str, Any]:
    """Loads a YAML config file into a dict of JobConfig fields."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}", path=config_path)

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}", path=config_path) from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping", path=config_path)

    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        key = str(key).replace("-", "_")
        normalized[_KEY_ALIASES.get(key, key)] = value
    return normalized


def build_job_config(data: Optional[Dict[str, Any]] = None, **overrides: Any) -> JobConfig:
    """Merges CLI overrides (None means "not given") over config file values."""
    merged: Dict[str, Any] = dict(data or {})
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not value and key in merged:
            continue
        merged[key] = value
    return JobConfig(**merged)
