"""Writes `.gem` archives from loaded specifications."""

import gzip
import hashlib
import io
import json
from pathlib import Path
import tarfile
import time

from pyvider.telemetry import logger

from ..crypto import load_private_key, sign_payload_hash
from ..exceptions import PackagingError
from ..models import (
    CHECKSUMS_ENTRY,
    DATA_ENTRY,
    METADATA_ENTRY,
    SIGNATURE_SUFFIX,
    SIGNED_ENTRIES,
    PackageArtifact,
    Specification,
)
from .validator import validate

CHECKSUM_ALGORITHMS = ("sha256", "sha512")


def _gzip_json(data: dict) -> bytes:
    return gzip.compress(
        json.dumps(data, indent=2, sort_keys=True).encode("utf-8"), mtime=0
    )


def _build_data_tarball(spec: Specification) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for rel_path in spec.files:
            tar.add(spec.source_dir / rel_path, arcname=rel_path, recursive=False)
    return buffer.getvalue()


def compute_checksums(entries: dict[str, bytes]) -> dict[str, dict[str, str]]:
    return {
        algorithm: {
            name: hashlib.new(algorithm, payload).hexdigest()
            for name, payload in sorted(entries.items())
        }
        for algorithm in CHECKSUM_ALGORITHMS
    }


def _sign_entries(spec: Specification, entries: dict[str, bytes]) -> dict[str, bytes]:
    key_path = spec.source_dir / spec.signing_key
    private_key = load_private_key(key_path)
    logger.info("Signing gem", gem=spec.full_name, key=str(key_path))
    return {
        f"{name}{SIGNATURE_SUFFIX}": sign_payload_hash(
            hashlib.sha256(entries[name]).digest(), private_key
        )
        for name in SIGNED_ENTRIES
    }


def _write_archive(output_path: Path, entries: dict[str, bytes]) -> None:
    mtime = int(time.time())
    with tarfile.open(output_path, mode="w", format=tarfile.PAX_FORMAT) as tar:
        for name, payload in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(payload)
            info.mode = 0o444
            info.mtime = mtime
            tar.addfile(info, io.BytesIO(payload))


def build_package(
    spec: Specification,
    force: bool = False,
    strict: bool = False,
    output: str | None = None,
) -> PackageArtifact:
    """
    Validates `spec` (unless `force`) and writes the gem archive.

    The archive is written to `output`, or to the spec's default file name,
    relative to the current working directory.
    """
    warnings = [] if force else validate(spec, strict=strict)
    output_path = Path(output or spec.file_name)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        entries = {
            METADATA_ENTRY: _gzip_json(spec.to_metadata()),
            DATA_ENTRY: _build_data_tarball(spec),
        }
        entries[CHECKSUMS_ENTRY] = _gzip_json(compute_checksums(entries))
        if spec.signing_key:
            entries.update(_sign_entries(spec, entries))

        _write_archive(output_path, entries)
    except OSError as e:
        raise PackagingError(f"Failed to write gem {output_path}: {e}") from e
    logger.info(
        "Gem written", gem=spec.full_name, path=str(output_path), force=force
    )
    return PackageArtifact(path=output_path, specification=spec, warnings=warnings)
