"""Python-based reader for built `.gem` archives."""

import gzip
import hashlib
import io
import json
from pathlib import Path
import tarfile
from typing import Any

from cryptography.hazmat.primitives.asymmetric import rsa

from ..crypto import verify_payload_signature
from ..exceptions import InvalidPackageError, SignatureVerificationError
from ..models import (
    CHECKSUMS_ENTRY,
    DATA_ENTRY,
    METADATA_ENTRY,
    SIGNATURE_SUFFIX,
    SIGNED_ENTRIES,
)
from .packager import compute_checksums


class GemReader:
    """Reads a gem archive and checks its internal consistency."""

    def __init__(self, package_path: Path) -> None:
        if not package_path.is_file():
            raise FileNotFoundError(f"Package not found at: {package_path}")
        self.package_path = package_path
        self.entries = self._read_entries()
        self._verify_checksums()
        self.metadata: dict[str, Any] = self._decode_json(METADATA_ENTRY)

    def _read_entries(self) -> dict[str, bytes]:
        try:
            with tarfile.open(self.package_path, mode="r:") as tar:
                entries = {}
                for member in tar.getmembers():
                    extracted = tar.extractfile(member)
                    if extracted is not None:
                        entries[member.name] = extracted.read()
        except tarfile.TarError as e:
            raise InvalidPackageError(f"Not a gem archive: {e}") from e

        missing = [
            name
            for name in (METADATA_ENTRY, DATA_ENTRY, CHECKSUMS_ENTRY)
            if name not in entries
        ]
        if missing:
            raise InvalidPackageError(f"Gem is missing entries: {missing}")
        return entries

    def _decode_json(self, name: str) -> dict[str, Any]:
        try:
            return json.loads(gzip.decompress(self.entries[name]))
        except (OSError, ValueError) as e:
            raise InvalidPackageError(f"Could not decode {name}: {e}") from e

    def _verify_checksums(self) -> None:
        recorded = self._decode_json(CHECKSUMS_ENTRY)
        actual = compute_checksums(
            {name: self.entries[name] for name in (METADATA_ENTRY, DATA_ENTRY)}
        )
        if recorded != actual:
            raise InvalidPackageError("Checksum mismatch in gem contents.")

    @property
    def is_signed(self) -> bool:
        return all(f"{n}{SIGNATURE_SUFFIX}" in self.entries for n in SIGNED_ENTRIES)

    def file_list(self) -> list[str]:
        data = io.BytesIO(self.entries[DATA_ENTRY])
        with tarfile.open(fileobj=data, mode="r:gz") as tar:
            return sorted(m.name for m in tar.getmembers() if m.isfile())

    def verify_signatures(self, public_key: rsa.RSAPublicKey) -> None:
        if not self.is_signed:
            raise SignatureVerificationError("Gem is not signed.")
        for name in SIGNED_ENTRIES:
            verify_payload_signature(
                hashlib.sha256(self.entries[name]).digest(),
                self.entries[f"{name}{SIGNATURE_SUFFIX}"],
                public_key,
            )

    def get_info(self) -> str:
        """Returns a human-readable string of the package information."""
        m = self.metadata
        return (
            f"Gem Package Information:\n"
            f"  Name: {m.get('name')}\n"
            f"  Version: {m.get('version')}\n"
            f"  Platform: {m.get('platform')}\n"
            f"  Files: {len(m.get('files', []))}\n"
            f"  Signed: {'yes' if self.is_signed else 'no'}"
        )
