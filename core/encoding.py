# --------------------------------------------------------------
# File: encoding.py
# Description: Conversión Base64 estándar y entre bytes y enteros grandes.
# --------------------------------------------------------------
"""Utilidades de bytes compartidas por el codificador y el decodificador."""

import base64
import binascii
from typing import Optional

from core.errors import Base64Error

__all__ = ["b64encode_std", "b64decode_std", "int_from_bytes", "int_to_bytes"]


def b64encode_std(data: bytes) -> str:
    """Codifica bytes en Base64 estándar con caracteres de relleno."""

    return base64.b64encode(data).decode("ascii")


def b64decode_std(value: str) -> bytes:
    """Decodifica Base64 estándar rechazando caracteres fuera del alfabeto.

    Args:
        value (str): Texto Base64 recibido desde el transporte.

    Returns:
        bytes: Datos binarios decodificados.

    Raises:
        Base64Error: Si el texto no es Base64 válido, el relleno es incorrecto
            o la codificación no es canónica.

    """

    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise Base64Error(f"Failed to decode base64: {exc}") from exc
    # Los bits sobrantes del último carácter deben ser cero ("QQ==", no "QR==").
    if b64encode_std(data) != value:
        raise Base64Error("Failed to decode base64: non-canonical encoding")
    return data


def int_from_bytes(data: bytes) -> int:
    """Interpreta los bytes como entero sin signo big-endian (OS2IP)."""

    return int.from_bytes(data, byteorder="big")


def int_to_bytes(value: int, length: Optional[int] = None) -> bytes:
    """Convierte un entero no negativo a bytes big-endian (I2OSP).

    Args:
        value (int): Entero a convertir.
        length (Optional[int]): Longitud fija de salida. Si se omite se usa la
            representación mínima, con un único byte para el cero.

    Returns:
        bytes: Representación big-endian del entero.

    Raises:
        ValueError: Si el entero es negativo o no cabe en ``length`` bytes.

    """

    if value < 0:
        raise ValueError("Integer must be non-negative")
    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    try:
        return value.to_bytes(length, byteorder="big")
    except OverflowError as exc:
        raise ValueError(f"Integer too large for {length} bytes") from exc
