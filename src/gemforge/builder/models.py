from pathlib import Path
from typing import Any

from attrs import asdict, define, field

GEMSPEC_EXTENSION: str = ".gemspec"
GEM_EXTENSION: str = ".gem"
DEFAULT_PLATFORM: str = "ruby"

# Members of a built .gem archive
METADATA_ENTRY: str = "metadata.gz"
DATA_ENTRY: str = "data.tar.gz"
CHECKSUMS_ENTRY: str = "checksums.json.gz"
SIGNATURE_SUFFIX: str = ".sig"
SIGNED_ENTRIES: tuple[str, ...] = (METADATA_ENTRY, DATA_ENTRY)


@define(frozen=True, slots=True)
class BuildOptions:
    """Settings for a single `gemforge build` invocation."""

    platform: str | None = None
    force: bool = False
    strict: bool = False
    output: str | None = None
    build_path: str | None = None


@define(frozen=True, slots=True)
class Specification:
    name: str
    version: str
    source_dir: Path = field(converter=Path)
    summary: str | None = None
    description: str | None = None
    authors: tuple[str, ...] = field(default=(), converter=tuple)
    email: str | None = None
    homepage: str | None = None
    license: str | None = None
    files: tuple[str, ...] = field(default=(), converter=tuple)
    dependencies: dict[str, str] = field(factory=dict)
    platform: str = DEFAULT_PLATFORM
    signing_key: str | None = None
    metadata: dict[str, str] = field(factory=dict)

    @property
    def full_name(self) -> str:
        if self.platform == DEFAULT_PLATFORM:
            return f"{self.name}-{self.version}"
        return f"{self.name}-{self.version}-{self.platform}"

    @property
    def file_name(self) -> str:
        return f"{self.full_name}{GEM_EXTENSION}"

    def to_metadata(self) -> dict[str, Any]:
        """Returns the JSON-serializable form embedded in `metadata.gz`."""
        data = asdict(self, recurse=False)
        data.pop("source_dir")
        data.pop("signing_key")
        data["authors"] = list(self.authors)
        data["files"] = list(self.files)
        return data


@define(frozen=True, slots=True)
class PackageArtifact:
    """A gem written to disk by the packager."""

    path: Path
    specification: Specification
    warnings: tuple[str, ...] = field(default=(), converter=tuple)
