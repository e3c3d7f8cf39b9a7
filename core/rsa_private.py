# --------------------------------------------------------------
# File: rsa_private.py
# Description: Operaciones del poseedor de la clave privada (lado servidor).
# --------------------------------------------------------------
"""Descifrado OAEP de peticiones y cifrado crudo PKCS#1 de las respuestas.

Las variantes ``oaep_decrypt``/``private_encrypt`` reciben la clave ya cargada
para no interpretar el PEM en cada petición; ``rsa_oaep_decrypt`` y
``rsa_private_encrypt`` aceptan directamente el PEM.
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from core.encoding import b64decode_std, b64encode_std, int_from_bytes, int_to_bytes
from core.errors import DecryptionError, PlaintextTooLongError, Utf8Error
from core.log import get_logger
from core.models import PKCS1_OVERHEAD
from core.rsa_keys import PemLike, load_private_key

logger = get_logger(__name__)

OAEP_SHA256 = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


def pkcs1_type1_pad(payload: bytes, k: int) -> bytes:
    """Construye el bloque ``0x00 0x01 [0xFF...] 0x00 payload`` de ``k`` bytes.

    Raises:
        PlaintextTooLongError: Si el payload supera ``k - 11`` bytes.

    """

    capacity = k - PKCS1_OVERHEAD
    if len(payload) > capacity:
        raise PlaintextTooLongError(len(payload), capacity)
    fill = b"\xff" * (k - len(payload) - 3)
    return b"\x00\x01" + fill + b"\x00" + payload


def raw_private_op(value: int, numbers: rsa.RSAPrivateNumbers) -> int:
    """Calcula ``value^d mod n`` usando el teorema chino del resto."""

    p, q = numbers.p, numbers.q
    m1 = pow(value % p, numbers.dmp1, p)
    m2 = pow(value % q, numbers.dmq1, q)
    h = (numbers.iqmp * (m1 - m2)) % p
    return m2 + h * q


def oaep_decrypt(ciphertext_b64: str, private_key: rsa.RSAPrivateKey) -> str:
    """Descifra un texto OAEP SHA-256 con una clave privada ya cargada.

    Raises:
        Base64Error: Si la entrada no es Base64 válido.
        DecryptionError: Si el ciphertext no descifra con la clave.
        Utf8Error: Si el resultado no es UTF-8 válido.

    """

    ciphertext = b64decode_std(ciphertext_b64)
    try:
        data = private_key.decrypt(ciphertext, OAEP_SHA256)
    except ValueError as exc:
        raise DecryptionError(f"Failed to decrypt: {exc}") from exc
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8Error(f"Failed to convert to string: {exc}") from exc


def private_encrypt(plaintext: str, private_key: rsa.RSAPrivateKey) -> str:
    """Cifra en crudo con una clave privada ya cargada.

    Raises:
        PlaintextTooLongError: Si el texto supera ``modulus_bytes - 11`` bytes.

    """

    numbers = private_key.private_numbers()
    k = (private_key.key_size + 7) // 8

    block = pkcs1_type1_pad(plaintext.encode("utf-8"), k)
    signature = int_to_bytes(raw_private_op(int_from_bytes(block), numbers), k)
    logger.debug("Raw private-key operation over a %d-byte block", k)
    return b64encode_std(signature)


def rsa_oaep_decrypt(ciphertext_b64: str, private_key_pem: PemLike) -> str:
    """Descifra un texto cifrado con RSA-OAEP SHA-256 por el cliente.

    Args:
        ciphertext_b64 (str): Ciphertext en Base64 estándar.
        private_key_pem (PemLike): Clave privada en PEM.

    Returns:
        str: Texto en claro.

    Raises:
        KeyParseError: Si la clave no se puede interpretar.
        Base64Error: Si la entrada no es Base64 válido.
        DecryptionError: Si el ciphertext no descifra con la clave.
        Utf8Error: Si el resultado no es UTF-8 válido.

    """

    return oaep_decrypt(ciphertext_b64, load_private_key(private_key_pem))


def rsa_private_encrypt(plaintext: str, private_key_pem: PemLike) -> str:
    """Cifra en crudo con la clave privada para que el cliente lo recupere.

    Aplica relleno PKCS#1 v1.5 tipo 1 y calcula ``m^d mod n``; el cliente lo
    invierte con la clave pública.

    Args:
        plaintext (str): Texto a cifrar.
        private_key_pem (PemLike): Clave privada en PEM.

    Returns:
        str: Ciphertext de ``modulus_bytes`` bytes en Base64 estándar.

    Raises:
        KeyParseError: Si la clave no se puede interpretar.
        PlaintextTooLongError: Si el texto supera ``modulus_bytes - 11`` bytes.

    """

    return private_encrypt(plaintext, load_private_key(private_key_pem))
