# --------------------------------------------------------------
# File: rsa_keys.py
# Description: Carga de claves RSA en formato PEM.
# --------------------------------------------------------------
"""Conversión de PEM a claves RSA utilizables por el codificador y el servidor."""

from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from core.errors import KeyParseError
from core.models import PublicKey

PemLike = Union[str, bytes]

SPKI_HEADER = b"-----BEGIN PUBLIC KEY-----"


def _pem_bytes(pem: PemLike) -> bytes:
    """Normaliza el PEM a bytes aceptando saltos de línea escapados."""

    if isinstance(pem, bytes):
        pem = pem.decode("ascii", errors="replace")
    return pem.replace("\\n", "\n").strip().encode("ascii", errors="replace")


def load_public_key(pem: PemLike) -> PublicKey:
    """Carga una clave pública RSA codificada como SPKI en PEM.

    Args:
        pem (PemLike): Texto ``-----BEGIN PUBLIC KEY-----`` completo.

    Returns:
        PublicKey: Módulo y exponente públicos.

    Raises:
        KeyParseError: Si el PEM es inválido o la clave no es RSA.

    """

    data = _pem_bytes(pem)
    if not data.startswith(SPKI_HEADER):
        raise KeyParseError("Failed to parse public key: expected a SPKI 'PUBLIC KEY' PEM")
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(f"Failed to parse public key: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyParseError("Failed to parse public key: not an RSA key")

    numbers = key.public_numbers()
    return PublicKey(n=numbers.n, e=numbers.e)


def load_private_key(pem: PemLike) -> rsa.RSAPrivateKey:
    """Carga una clave privada RSA sin cifrar (PKCS#8 o PKCS#1) en PEM.

    Args:
        pem (PemLike): Clave privada PEM.

    Returns:
        rsa.RSAPrivateKey: Clave privada de ``cryptography``.

    Raises:
        KeyParseError: Si el PEM es inválido, está cifrado o no es RSA.

    """

    try:
        key = serialization.load_pem_private_key(_pem_bytes(pem), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(f"Failed to parse private key: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyParseError("Failed to parse private key: not an RSA key")
    return key
