"""Pytest fixtures for the entire gemforge-builder test suite."""

from pathlib import Path
from typing import Callable

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

from gemforge.builder.crypto import generate_keys

VALID_GEMSPEC = """
name = "{name}"
version = "1.0.0"
summary = "A sample gem"
description = "A longer description of the sample gem."
authors = ["Jane Doe"]
homepage = "https://example.com/{name}"
license = "MIT"
files = ["lib/**/*.rb"]
"""


@pytest.fixture(scope="session")
def key_pair() -> tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """Generates a single RSA key pair for the entire test session."""
    return generate_keys()


@pytest.fixture(scope="session")
def private_key(key_pair: tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]) -> rsa.RSAPrivateKey:
    return key_pair[0]


@pytest.fixture(scope="session")
def public_key(key_pair: tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]) -> rsa.RSAPublicKey:
    return key_pair[1]


@pytest.fixture(scope="session")
def public_key_pem(public_key: rsa.RSAPublicKey) -> bytes:
    """Provides the public key serialized in PEM format."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def private_key_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    """Provides the private key serialized in PEM format."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def make_gem_project() -> Callable[..., Path]:
    """
    A factory fixture that writes a gemspec and the library file it
    references into a given directory.
    """

    def _make_project(root_dir: Path, name: str = "sample", extra: str = "") -> Path:
        (root_dir / "lib").mkdir(parents=True, exist_ok=True)
        (root_dir / "lib" / f"{name}.rb").write_text(f"module {name.capitalize()}; end\n")
        gemspec = root_dir / f"{name}.gemspec"
        gemspec.write_text(VALID_GEMSPEC.format(name=name) + extra)
        return gemspec

    return _make_project
