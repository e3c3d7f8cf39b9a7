# --------------------------------------------------------------
# File: rsa_raw.py
# Description: Recuperación de mensajes firmados en crudo con la clave pública.
# --------------------------------------------------------------
"""Decodificador que aplica ``c^e mod n`` y retira el relleno PKCS#1 tipo 1.

El otro extremo produce el ciphertext con una operación RSA cruda de clave
privada sobre ``0x00 0x01 [0xFF...] 0x00 payload``. Aquí se invierte con la
clave pública, igual que una verificación de firma, pero para recuperar el
mensaje: no se comprueba ninguna firma ni su origen.

El modo por defecto es permisivo y solo exige un separador ``0x00`` a partir
del índice 2. El modo estricto (``strict=True``) es un cambio de
comportamiento explícito que valida además el byte de tipo ``0x01`` y el
relleno ``0xFF``.
"""

from core.encoding import b64decode_std, int_from_bytes, int_to_bytes
from core.errors import InvalidPaddingError, Utf8Error
from core.log import get_logger
from core.models import PKCS1_OVERHEAD, PublicKey
from core.rsa_keys import PemLike, load_public_key

logger = get_logger(__name__)

# Número mínimo de bytes 0xFF de relleno en PKCS#1 v1.5.
MIN_FILL_BYTES = 8


def unpad_pkcs1_lenient(padded: bytes) -> bytes:
    """Retira el relleno buscando el primer ``0x00`` desde el índice 2.

    Args:
        padded (bytes): Representación mínima big-endian del mensaje recuperado.

    Returns:
        bytes: Payload situado tras el separador.

    Raises:
        InvalidPaddingError: Si hay menos de 11 bytes o no existe separador.

    """

    if len(padded) < PKCS1_OVERHEAD:
        raise InvalidPaddingError("Decryption failed: invalid padding")
    separator = padded.find(b"\x00", 2)
    if separator < 0:
        raise InvalidPaddingError("Decryption failed: no padding separator found")
    return padded[separator + 1:]


def unpad_pkcs1_strict(padded: bytes, k: int) -> bytes:
    """Valida la estructura completa ``0x00 0x01 0xFF.. 0x00 payload``.

    Args:
        padded (bytes): Mensaje recuperado en representación mínima.
        k (int): Longitud del módulo en bytes.

    Returns:
        bytes: Payload situado tras el separador.

    Raises:
        InvalidPaddingError: Ante cualquier desviación del formato.

    """

    if len(padded) > k:
        raise InvalidPaddingError("Decryption failed: invalid padding")
    block = b"\x00" * (k - len(padded)) + padded
    if k < PKCS1_OVERHEAD or block[0] != 0x00 or block[1] != 0x01:
        raise InvalidPaddingError("Decryption failed: invalid padding type")
    separator = block.find(b"\x00", 2)
    if separator < 0:
        raise InvalidPaddingError("Decryption failed: no padding separator found")
    fill = block[2:separator]
    if len(fill) < MIN_FILL_BYTES or fill.strip(b"\xff"):
        raise InvalidPaddingError("Decryption failed: invalid padding bytes")
    return block[separator + 1:]


class RawRsaDecoder:
    """Recupera textos cifrados en crudo con la clave privada del otro extremo.

    Attributes:
        public_key (PublicKey): Clave pública del emisor.
        strict (bool): Activa la validación completa del relleno.

    """

    def __init__(self, public_key: PublicKey, strict: bool = False) -> None:
        self.public_key = public_key
        self.strict = strict

    @classmethod
    def from_pem(cls, pem: PemLike, strict: bool = False) -> "RawRsaDecoder":
        """Crea el decodificador a partir de un PEM SPKI."""

        return cls(load_public_key(pem), strict=strict)

    def recover(self, ciphertext: bytes) -> bytes:
        """Aplica ``c^e mod n`` y devuelve el payload sin relleno."""

        key = self.public_key
        c = int_from_bytes(ciphertext)
        if self.strict and c >= key.n:
            raise InvalidPaddingError("Decryption failed: ciphertext out of range")

        padded = int_to_bytes(pow(c, key.e, key.n))
        if self.strict:
            return unpad_pkcs1_strict(padded, key.modulus_bytes)
        return unpad_pkcs1_lenient(padded)

    def decode(self, ciphertext_b64: str) -> str:
        """Decodifica el Base64, recupera el payload y lo interpreta como UTF-8.

        Raises:
            Base64Error: Si la entrada no es Base64 válido.
            InvalidPaddingError: Si el relleno no es reconocible.
            Utf8Error: Si el payload no es UTF-8 válido.

        """

        payload = self.recover(b64decode_std(ciphertext_b64))
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Utf8Error(f"Failed to convert to string: {exc}") from exc
        logger.debug("Recovered %d bytes of payload", len(payload))
        return text


def rsa_public_decrypt(ciphertext_b64: str, public_key_pem: PemLike, *, strict: bool = False) -> str:
    """Recupera el texto que el poseedor de la clave privada cifró en crudo.

    Args:
        ciphertext_b64 (str): Ciphertext en Base64 estándar.
        public_key_pem (PemLike): Clave pública SPKI en PEM.
        strict (bool): Valida también el tipo ``0x01`` y el relleno ``0xFF``.

    Returns:
        str: Texto en claro recuperado.

    Raises:
        KeyParseError: Si la clave no se puede interpretar.
        Base64Error: Si la entrada no es Base64 válido.
        InvalidPaddingError: Si el relleno no es reconocible.
        Utf8Error: Si el payload no es UTF-8 válido.

    """

    return RawRsaDecoder.from_pem(public_key_pem, strict=strict).decode(ciphertext_b64)
