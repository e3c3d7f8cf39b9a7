# --------------------------------------------------------------
# File: config.py
# Description: Carga de configuración desde el entorno y ficheros .env.
# --------------------------------------------------------------
"""Parámetros de ejecución y acceso a las claves RSA definidas en el entorno."""

import os

from dotenv import load_dotenv

from core.errors import ConfigError

load_dotenv()

GREETING_API_URL = os.getenv("GREETING_API_URL", "http://localhost:3000")
SERVER_HOST = os.getenv("SERVER_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("SERVER_PORT", "3000"))
SERVER_WORKERS = int(os.getenv("SERVER_WORKERS", "2"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _read_pem(var_name: str) -> str:
    """Lee un PEM del entorno restaurando los saltos de línea escapados."""

    value = os.getenv(var_name)
    if not value:
        raise ConfigError(f"{var_name} must be set in environment variables")
    # Los .env de una sola línea guardan los saltos como "\n" literales.
    return value.replace("\\n", "\n").strip()


def get_public_key_from_env() -> str:
    """Obtiene la clave pública PEM de ``RSA_PUBLIC_KEY``.

    Returns:
        str: Clave pública en formato PEM (SPKI).

    Raises:
        ConfigError: Si la variable no está definida.

    """

    return _read_pem("RSA_PUBLIC_KEY")


def get_private_key_from_env() -> str:
    """Obtiene la clave privada PEM de ``RSA_PRIVATE_KEY``.

    Returns:
        str: Clave privada en formato PEM.

    Raises:
        ConfigError: Si la variable no está definida.

    """

    return _read_pem("RSA_PRIVATE_KEY")
