# --------------------------------------------------------------
# File: models.py
# Description: Modelos de datos comunes utilizados por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos Pydantic que encapsulan claves y mensajes del intercambio cifrado."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Sobrecarga de los rellenos: OAEP con SHA-256 (2*32+2) y PKCS#1 v1.5 (11).
SHA256_LEN = 32
OAEP_OVERHEAD = 2 * SHA256_LEN + 2
PKCS1_OVERHEAD = 11


class PublicKey(BaseModel):
    """Clave pública RSA inmutable.

    Attributes:
        n (int): Módulo RSA.
        e (int): Exponente público, normalmente 65537.

    """

    model_config = ConfigDict(frozen=True)

    n: int
    e: int

    @property
    def modulus_bytes(self) -> int:
        """Longitud en bytes del módulo, igual a la de todo ciphertext."""

        return (self.n.bit_length() + 7) // 8

    @property
    def oaep_capacity(self) -> int:
        """Máximo de bytes de texto admitidos por RSA-OAEP con SHA-256."""

        return self.modulus_bytes - OAEP_OVERHEAD

    @property
    def pkcs1_capacity(self) -> int:
        """Máximo de bytes de payload admitidos por el relleno PKCS#1 v1.5."""

        return self.modulus_bytes - PKCS1_OVERHEAD


class EncryptedRequest(BaseModel):
    """Cuerpo JSON enviado al servidor con el nombre cifrado en Base64."""

    name: str


class EncryptedResponse(BaseModel):
    """Respuesta del servidor con el saludo cifrado con la clave privada.

    Attributes:
        encrypted_greeting (str): Ciphertext Base64 (campo ``encryptedGreeting``).
        message (str): Mensaje informativo del servidor.

    """

    model_config = ConfigDict(populate_by_name=True)

    encrypted_greeting: str = Field(alias="encryptedGreeting")
    message: str = ""


class ErrorResponse(BaseModel):
    """Cuerpo JSON de error devuelto por el servidor."""

    error: str
    details: Optional[str] = None
