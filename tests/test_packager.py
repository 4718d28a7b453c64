"""Tests for gemspec validation and gem archive creation."""

import gzip
import json
from pathlib import Path
import tarfile

import attrs
import pytest
from pytest import MonkeyPatch

from gemforge.builder.exceptions import (
    InvalidSpecificationError,
    PackagingError,
    SigningError,
)
from gemforge.builder.models import Specification
from gemforge.builder.packaging.packager import build_package
from gemforge.builder.packaging.validator import find_errors, find_warnings, validate


@pytest.fixture
def spec(tmp_path: Path) -> Specification:
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "sample.rb").write_text("module Sample; end\n")
    return Specification(
        name="sample",
        version="1.2.3",
        source_dir=tmp_path,
        summary="A sample gem",
        description="Longer text.",
        authors=["Jane Doe"],
        homepage="https://example.com",
        license="MIT",
        files=["lib/sample.rb"],
        dependencies={"rake": "~> 13.0"},
    )


def test_valid_spec_has_no_errors_or_warnings(spec: Specification) -> None:
    assert find_errors(spec) == []
    assert validate(spec) == []


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"name": ""}, "missing value for attribute name"),
        ({"version": ""}, "missing value for attribute version"),
        ({"summary": None}, "missing value for attribute summary"),
        ({"authors": []}, "authors may not be empty"),
        ({"name": "bad name!"}, "invalid value for attribute name"),
        ({"name": "1234"}, "must include at least one letter"),
        ({"version": "1.0 beta"}, "invalid value for attribute version"),
        ({"files": ["lib/sample.rb", "lib/gone.rb"]}, "[lib/gone.rb] are not files"),
    ],
)
def test_validation_errors(spec: Specification, changes: dict, message: str) -> None:
    broken = attrs.evolve(spec, **changes)
    with pytest.raises(InvalidSpecificationError) as exc_info:
        validate(broken)
    assert message in str(exc_info.value)


def test_warnings_only_fail_under_strict(spec: Specification) -> None:
    loose = attrs.evolve(spec, license=None, dependencies={"json": ">= 0"})

    assert find_warnings(loose) == [
        "licenses is empty",
        "open-ended dependency on json is not recommended",
    ]
    assert validate(loose) == find_warnings(loose)
    with pytest.raises(InvalidSpecificationError, match="licenses is empty"):
        validate(loose, strict=True)


def test_build_package_writes_gem(
    spec: Specification, tmp_path: Path, monkeypatch: MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    artifact = build_package(spec)

    assert artifact.path == Path("sample-1.2.3.gem")
    assert artifact.path.is_file()
    with tarfile.open(artifact.path) as tar:
        names = tar.getnames()
        metadata = json.loads(gzip.decompress(tar.extractfile("metadata.gz").read()))
    assert names == ["metadata.gz", "data.tar.gz", "checksums.json.gz"]
    assert metadata["name"] == "sample"
    assert metadata["files"] == ["lib/sample.rb"]
    assert metadata["dependencies"] == {"rake": "~> 13.0"}
    assert "source_dir" not in metadata


def test_build_package_honors_output(spec: Specification, tmp_path: Path) -> None:
    output = tmp_path / "dist" / "custom.gem"

    artifact = build_package(spec, output=str(output))

    assert artifact.path == output
    assert output.is_file()


def test_force_skips_validation(spec: Specification, tmp_path: Path) -> None:
    unlicensed = attrs.evolve(spec, license=None, summary=None)
    output = tmp_path / "forced.gem"

    with pytest.raises(InvalidSpecificationError):
        build_package(unlicensed, output=str(output))
    assert not output.exists()

    artifact = build_package(unlicensed, force=True, strict=True, output=str(output))
    assert artifact.warnings == ()
    assert output.is_file()


def test_strict_rejects_warnings(spec: Specification, tmp_path: Path) -> None:
    with pytest.raises(InvalidSpecificationError):
        build_package(
            attrs.evolve(spec, homepage=None),
            strict=True,
            output=str(tmp_path / "strict.gem"),
        )


def test_build_package_signs_when_key_configured(
    spec: Specification, tmp_path: Path, private_key_pem: bytes
) -> None:
    (tmp_path / "gem-private.key").write_bytes(private_key_pem)
    signed = attrs.evolve(spec, signing_key="gem-private.key")

    artifact = build_package(signed, output=str(tmp_path / "signed.gem"))

    with tarfile.open(artifact.path) as tar:
        names = set(tar.getnames())
    assert {"metadata.gz.sig", "data.tar.gz.sig"} <= names


def test_build_package_missing_signing_key(spec: Specification, tmp_path: Path) -> None:
    unsigned = attrs.evolve(spec, signing_key="keys/absent.key")

    with pytest.raises(SigningError, match="Could not load signing key"):
        build_package(unsigned, output=str(tmp_path / "out.gem"))


def test_build_package_wraps_output_directory_errors(
    spec: Specification, tmp_path: Path
) -> None:
    (tmp_path / "afile").write_text("not a directory")

    with pytest.raises(PackagingError, match="Failed to write gem"):
        build_package(spec, output=str(tmp_path / "afile" / "out.gem"))
