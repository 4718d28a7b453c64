"""Build defaults read from `[tool.gemforge.build]` in pyproject.toml."""

from pathlib import Path
import tomllib
from typing import Any

import click

_OPTION_TYPES: dict[str, type] = {
    "platform": str,
    "force": bool,
    "strict": bool,
    "output": str,
}


def load_build_defaults(manifest_path: Path = Path("pyproject.toml")) -> dict[str, Any]:
    """Returns the configured build defaults, or an empty dict if none exist."""
    if not manifest_path.is_file():
        return {}

    try:
        with manifest_path.open("rb") as f:
            pyproject_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise click.UsageError(f"Could not parse {manifest_path}: {e}") from e

    build_conf = pyproject_data.get("tool", {}).get("gemforge", {}).get("build", {})
    if not isinstance(build_conf, dict):
        raise click.UsageError("[tool.gemforge.build] must be a table.")

    defaults = {}
    for key, value in build_conf.items():
        expected = _OPTION_TYPES.get(key)
        if expected is None:
            raise click.UsageError(
                f"Unknown option '{key}' in [tool.gemforge.build]."
            )
        if not isinstance(value, expected):
            raise click.UsageError(
                f"Option '{key}' in [tool.gemforge.build] must be a {expected.__name__}."
            )
        defaults[key] = value
    return defaults
