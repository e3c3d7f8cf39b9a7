# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública de utilidades criptográficas del paquete core.
# --------------------------------------------------------------
"""Inicializa el paquete `core` y documenta sus módulos principales."""

__all__ = [
    "config",
    "encoding",
    "errors",
    "log",
    "models",
    "rsa_keys",
    "rsa_oaep",
    "rsa_private",
    "rsa_raw",
]
