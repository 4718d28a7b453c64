"""Content and metadata checks run before a gem is packaged."""

import re

from pyvider.telemetry import logger

from ..exceptions import InvalidSpecificationError
from ..models import Specification

VALID_NAME_PATTERN = re.compile(r"\A[a-zA-Z0-9._-]+\Z")
VALID_VERSION_PATTERN = re.compile(
    r"\A[0-9]+(\.[0-9a-zA-Z]+)*(-[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?\Z"
)
OPEN_ENDED_REQUIREMENTS = frozenset({"", ">= 0", ">=0"})


def find_errors(spec: Specification) -> list[str]:
    errors = []
    for attribute in ("name", "version", "summary"):
        if not getattr(spec, attribute):
            errors.append(f"missing value for attribute {attribute}")
    if not spec.authors:
        errors.append("authors may not be empty")

    if spec.name:
        if not VALID_NAME_PATTERN.match(spec.name):
            errors.append(f"invalid value for attribute name: {spec.name!r}")
        elif not any(c.isalpha() for c in spec.name):
            errors.append(
                f"invalid value for attribute name: {spec.name!r} "
                "must include at least one letter"
            )
    if spec.version and not VALID_VERSION_PATTERN.match(spec.version):
        errors.append(f"invalid value for attribute version: {spec.version!r}")

    missing = [f for f in spec.files if not (spec.source_dir / f).is_file()]
    if missing:
        errors.append(f"[{', '.join(missing)}] are not files")
    return errors


def find_warnings(spec: Specification) -> list[str]:
    warnings = []
    if not spec.license:
        warnings.append("licenses is empty")
    if not spec.homepage:
        warnings.append("no homepage specified")
    if not spec.description:
        warnings.append("no description specified")
    for name, requirement in sorted(spec.dependencies.items()):
        if requirement.strip() in OPEN_ENDED_REQUIREMENTS:
            warnings.append(f"open-ended dependency on {name} is not recommended")
    return warnings


def validate(spec: Specification, strict: bool = False) -> list[str]:
    """
    Validates a specification before packaging.

    Raises InvalidSpecificationError for errors, and for warnings too when
    `strict` is set. Otherwise returns the warnings.
    """
    errors = find_errors(spec)
    if errors:
        raise InvalidSpecificationError("; ".join(errors))

    warnings = find_warnings(spec)
    for warning in warnings:
        logger.warning("Gemspec validation warning", gem=spec.name, warning=warning)
    if strict and warnings:
        raise InvalidSpecificationError(
            "specification has warnings: " + "; ".join(warnings)
        )
    return warnings
