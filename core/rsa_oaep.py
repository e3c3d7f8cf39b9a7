# --------------------------------------------------------------
# File: rsa_oaep.py
# Description: Cifrado RSA-OAEP (SHA-256 / MGF1-SHA-256) con la clave pública.
# --------------------------------------------------------------
"""Codificador que cifra textos cortos para el poseedor de la clave privada."""

import os
from typing import Callable, Optional

from Crypto.Cipher import PKCS1_OAEP
from Crypto.Hash import SHA256
from Crypto.PublicKey import RSA

from core.encoding import b64encode_std
from core.errors import EncryptionError, PlaintextTooLongError
from core.log import get_logger
from core.models import PublicKey
from core.rsa_keys import PemLike, load_public_key

logger = get_logger(__name__)

# Fuente de aleatoriedad: recibe un número de bytes y los devuelve.
RandomSource = Callable[[int], bytes]


class OaepEncoder:
    """Cifra textos con RSA-OAEP usando una clave pública fijada al construirlo.

    La instancia no guarda estado mutable, por lo que puede compartirse entre
    hilos siempre que la fuente aleatoria también lo permita (``os.urandom``).

    Attributes:
        public_key (PublicKey): Clave pública de destino.

    """

    def __init__(self, public_key: PublicKey, rng: Optional[RandomSource] = None) -> None:
        self.public_key = public_key
        self._rng = rng or os.urandom
        self._rsa_key = RSA.construct((public_key.n, public_key.e))

    @classmethod
    def from_pem(cls, pem: PemLike, rng: Optional[RandomSource] = None) -> "OaepEncoder":
        """Crea el codificador a partir de un PEM SPKI."""

        return cls(load_public_key(pem), rng=rng)

    def _random_bytes(self, size: int) -> bytes:
        """Pide ``size`` bytes a la fuente aleatoria validando su respuesta."""

        try:
            seed = self._rng(size)
        except Exception as exc:
            raise EncryptionError(f"Failed to encrypt: random source failed: {exc}") from exc
        if not isinstance(seed, (bytes, bytearray)) or len(seed) != size:
            raise EncryptionError("Failed to encrypt: random source returned an invalid seed")
        return bytes(seed)

    def encrypt(self, data: bytes) -> bytes:
        """Cifra bytes y devuelve el ciphertext crudo de ``modulus_bytes`` bytes.

        Raises:
            PlaintextTooLongError: Si ``data`` supera la capacidad OAEP.
            EncryptionError: Si la fuente aleatoria o el cifrado fallan.

        """

        key = self.public_key
        if len(data) > key.oaep_capacity:
            raise PlaintextTooLongError(len(data), key.oaep_capacity)

        cipher = PKCS1_OAEP.new(self._rsa_key, hashAlgo=SHA256, randfunc=self._random_bytes)
        try:
            ciphertext = cipher.encrypt(data)
        except ValueError as exc:
            raise EncryptionError(f"Failed to encrypt: {exc}") from exc
        logger.debug("OAEP encrypted %d bytes with a %d-bit key", len(data), key.modulus_bytes * 8)
        return ciphertext

    def encode(self, plaintext: str) -> str:
        """Cifra un texto UTF-8 y devuelve el ciphertext en Base64 estándar."""

        return b64encode_std(self.encrypt(plaintext.encode("utf-8")))


def rsa_oaep_encrypt(
    plaintext: str, public_key_pem: PemLike, *, rng: Optional[RandomSource] = None
) -> str:
    """Cifra ``plaintext`` con la clave pública usando RSA-OAEP SHA-256.

    Args:
        plaintext (str): Texto a cifrar.
        public_key_pem (PemLike): Clave pública SPKI en PEM.
        rng (Optional[RandomSource]): Fuente de bytes aleatorios para la semilla.

    Returns:
        str: Ciphertext codificado en Base64 estándar.

    Raises:
        KeyParseError: Si la clave no se puede interpretar.
        PlaintextTooLongError: Si el texto supera ``modulus_bytes - 66`` bytes.
        EncryptionError: Si la fuente aleatoria falla.

    """

    return OaepEncoder.from_pem(public_key_pem, rng=rng).encode(plaintext)
