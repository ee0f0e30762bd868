"""YAML config loading with env var expansion.

The ``writers`` section supplies the defaults every generated writer starts
from when its class or builder is given no explicit configuration.
"""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import LinewiseConfig

CONFIG_ENV_VAR = "LINEWISE_CONFIG"
PROJECT_CONFIG = Path("linewise.yaml")


def candidate_paths(cli_path: str | None = None) -> list[Path]:
    """Config locations in priority order: CLI > $LINEWISE_CONFIG > project > user."""
    paths = []
    if cli_path:
        paths.append(Path(cli_path))
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path))
    paths.append(PROJECT_CONFIG)
    paths.append(Path.home() / ".linewise" / "config.yaml")
    return paths


def find_config_path(cli_path: str | None = None) -> Path | None:
    """Return the first candidate file with content, or None for built-in defaults."""
    for path in candidate_paths(cli_path):
        if path.is_file() and _read_raw(path) is not None:
            return path
    return None


def load_config(cli_path: str | None = None) -> LinewiseConfig:
    """Load the first non-empty config file, falling back to defaults."""
    path = find_config_path(cli_path)
    if path is None:
        return LinewiseConfig()
    raw = _read_raw(path)
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: root must be a mapping")
    try:
        return LinewiseConfig(**_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def _read_raw(path: Path) -> object:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def render_config_template(method: str = "write_handle", binmode: str = "encoding(UTF-8)") -> str:
    """Commented linewise.yaml for `linewise config init`."""
    return DEFAULT_CONFIG_TEMPLATE.format(method=method, binmode=binmode)


DEFAULT_CONFIG_TEMPLATE = """\
# linewise.yaml
# Defaults for classes decorated with @writers and for build_writers()
# when no explicit configuration is passed.

writers:
  method: "{method}"           # handle-writing method the generated writers call
  binmode: "{binmode}"         # raw | utf8 | crlf | encoding(NAME), colon-separated

# Logging (linewise CLI)
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
