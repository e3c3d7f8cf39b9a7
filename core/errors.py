# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones del intercambio RSA de saludos.
# --------------------------------------------------------------
"""Excepciones tipadas que emiten el codificador, el decodificador y el transporte."""

from typing import Optional


class GreetingCryptoError(Exception):
    """Excepción base de todos los errores del paquete."""


class ConfigError(GreetingCryptoError):
    """Falta una variable de entorno obligatoria o es inválida."""


class EncodeError(GreetingCryptoError):
    """Fallo al cifrar un texto en claro con la clave pública."""


class DecodeError(GreetingCryptoError):
    """Fallo al recuperar un texto en claro a partir de un ciphertext."""


class KeyParseError(EncodeError, DecodeError):
    """El PEM recibido está mal formado o no contiene una clave RSA."""


class PlaintextTooLongError(EncodeError):
    """El texto supera la capacidad del módulo para el relleno elegido.

    Attributes:
        length (int): Longitud en bytes del texto recibido.
        capacity (int): Longitud máxima admitida por la clave.

    """

    def __init__(self, length: int, capacity: int) -> None:
        self.length = length
        self.capacity = capacity
        super().__init__(
            f"Plaintext of {length} bytes exceeds the {capacity}-byte capacity of the key"
        )

    def __reduce__(self):
        # Viaja entre procesos del pool del servidor.
        return (type(self), (self.length, self.capacity))


class EncryptionError(EncodeError):
    """La operación criptográfica subyacente no pudo completarse."""


class Base64Error(DecodeError):
    """La codificación Base64 de transporte es inválida."""


class InvalidPaddingError(DecodeError):
    """El mensaje recuperado no respeta la estructura PKCS#1 esperada."""


class Utf8Error(DecodeError):
    """El payload recuperado no es texto UTF-8 válido."""


class DecryptionError(DecodeError):
    """El descifrado OAEP con la clave privada ha fallado."""


class TransportError(GreetingCryptoError):
    """Error de red o respuesta HTTP no satisfactoria del servidor remoto.

    Attributes:
        status (Optional[int]): Código HTTP devuelto, si hubo respuesta.

    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)

    def __reduce__(self):
        return (type(self), (str(self), self.status))


class ResponseFormatError(TransportError):
    """El cuerpo de la respuesta no tiene el formato JSON acordado."""
