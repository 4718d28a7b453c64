"""Loads TOML `.gemspec` files into Specification objects."""

from pathlib import Path
import tomllib
from typing import Any

from pyvider.telemetry import logger

from .models import DEFAULT_PLATFORM, Specification

_STRING_FIELDS = (
    "summary",
    "description",
    "email",
    "homepage",
    "license",
    "platform",
    "signing_key",
)
_KNOWN_FIELDS = frozenset(
    {"name", "version", "authors", "files", "dependencies", "metadata"}
    | set(_STRING_FIELDS)
)
_GLOB_CHARS = frozenset("*?[")


def _expect_string_table(data: dict[str, Any], key: str) -> dict[str, str]:
    table = data.get(key, {})
    if not isinstance(table, dict) or not all(
        isinstance(v, str) for v in table.values()
    ):
        raise TypeError(f"'{key}' must be a table of strings")
    return dict(table)


def _expect_string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key, [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"'{key}' must be a string or a list of strings")
    return value


def expand_files(patterns: list[str], base_dir: Path) -> list[str]:
    """
    Expands glob patterns against base_dir.

    Literal entries are kept even when they do not exist, so that validation
    can report them as missing. Absolute entries raise ValueError.
    """
    expanded: list[str] = []
    for pattern in patterns:
        if Path(pattern).anchor:
            raise ValueError(f"File pattern must be relative: {pattern!r}")
        if _GLOB_CHARS.intersection(pattern):
            expanded.extend(
                path.relative_to(base_dir).as_posix()
                for path in sorted(base_dir.glob(pattern))
                if path.is_file()
            )
        else:
            expanded.append(pattern)
    return list(dict.fromkeys(expanded))


def _build_specification(
    data: dict[str, Any], platform: str | None
) -> Specification:
    unknown = set(data) - _KNOWN_FIELDS
    if unknown:
        raise ValueError(f"Unknown gemspec attributes: {sorted(unknown)}")

    strings = {}
    for key in _STRING_FIELDS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise TypeError(f"'{key}' must be a string")
        strings[key] = value

    source_dir = Path.cwd()
    return Specification(
        name=str(data.get("name", "")),
        version=str(data.get("version", "")),
        source_dir=source_dir,
        summary=strings["summary"],
        description=strings["description"],
        authors=_expect_string_list(data, "authors"),
        email=strings["email"],
        homepage=strings["homepage"],
        license=strings["license"],
        files=expand_files(_expect_string_list(data, "files"), source_dir),
        dependencies=_expect_string_table(data, "dependencies"),
        platform=platform or strings["platform"] or DEFAULT_PLATFORM,
        signing_key=strings["signing_key"],
        metadata=_expect_string_table(data, "metadata"),
    )


def load_specification(
    path: Path | str, platform: str | None = None
) -> Specification | None:
    """
    Loads the gemspec at `path`, relative to the current working directory.

    Returns None if the file cannot be read or does not describe a gem.
    File patterns are expanded against the current working directory, which
    becomes the specification's `source_dir`.
    """
    gemspec_path = Path(path)
    try:
        with gemspec_path.open("rb") as f:
            data = tomllib.load(f)
        if not data:
            logger.warning("Gemspec is empty", path=str(gemspec_path))
            return None
        spec = _build_specification(data, platform)
    except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
        logger.warning(
            "Invalid gemspec", path=str(gemspec_path), error=str(e)
        )
        return None

    logger.debug(
        "Loaded gemspec",
        path=str(gemspec_path),
        full_name=spec.full_name,
        files=len(spec.files),
    )
    return spec
