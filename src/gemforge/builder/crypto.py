"""
Centralized cryptographic operations for signing and verifying gems.
"""

from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .exceptions import SignatureVerificationError, SigningError

_PSS_PADDING = padding.PSS(
    mgf=padding.MGF1(hashes.SHA256()), salt_length=hashes.SHA256.digest_size
)


def generate_keys() -> tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """Generates a new 4096-bit RSA key pair."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=4096)
    return private_key, private_key.public_key()


def write_key_pair(
    private_key: rsa.RSAPrivateKey, private_path: Path, public_path: Path
) -> None:
    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    private_path.chmod(0o600)
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )


def load_private_key(path: Path) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(path.read_bytes(), password=None)
    except (OSError, ValueError, TypeError) as e:
        raise SigningError(f"Could not load signing key '{path}': {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(f"Signing key '{path}' is not an RSA private key.")
    return key


def load_public_key(path: Path) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_pem_public_key(path.read_bytes())
    except (OSError, ValueError) as e:
        raise SignatureVerificationError(
            f"Could not load public key '{path}': {e}"
        ) from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise SignatureVerificationError(
            f"Public key '{path}' is not an RSA public key."
        )
    return key


def sign_payload_hash(payload_hash: bytes, private_key: rsa.RSAPrivateKey) -> bytes:
    """Signs a 32-byte SHA-256 hash using RSA-PSS."""
    if not isinstance(payload_hash, bytes) or len(payload_hash) != 32:
        raise SigningError("Payload hash must be a 32-byte SHA-256 hash.")

    return private_key.sign(payload_hash, _PSS_PADDING, hashes.SHA256())


def verify_payload_signature(
    payload_hash: bytes, signature: bytes, public_key: rsa.RSAPublicKey
) -> None:
    try:
        public_key.verify(signature, payload_hash, _PSS_PADDING, hashes.SHA256())
    except InvalidSignature as e:
        raise SignatureVerificationError("Signature does not match payload.") from e
