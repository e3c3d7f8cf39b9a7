# --------------------------------------------------------------
# File: server.py
# Description: Servicio HTTP que responde saludos cifrados con la clave privada.
# --------------------------------------------------------------
"""Aplicación aiohttp del poseedor de la clave privada.

Recibe ``{"name": "<base64>"}`` cifrado con OAEP, construye ``Hello <name>``
y lo devuelve cifrado en crudo con la clave privada en ``encryptedGreeting``.

Las operaciones con la clave privada se ejecutan en un ``ProcessPoolExecutor``
para que el bucle de eventos siga atendiendo peticiones mientras se calculan.
"""

import asyncio
import json
import sys
from concurrent.futures import Executor, ProcessPoolExecutor
from typing import AsyncIterator, Optional, Tuple

from aiohttp import web
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from core import config
from core.errors import ConfigError, GreetingCryptoError, KeyParseError
from core.log import configure_logging, get_logger
from core.models import EncryptedResponse, ErrorResponse
from core.rsa_keys import load_private_key
from core.rsa_private import oaep_decrypt, private_encrypt

logger = get_logger(__name__)

PRIVATE_KEY = web.AppKey("private_key", rsa.RSAPrivateKey)
EXECUTOR = web.AppKey("executor", Executor)

# Clave cargada en cada proceso del pool por ``_init_worker``.
_worker_key: Optional[rsa.RSAPrivateKey] = None


def _init_worker(private_key_pem: bytes) -> None:
    global _worker_key
    _worker_key = load_private_key(private_key_pem)


def _process_name(encrypted_name: str) -> Tuple[str, str]:
    """Descifra el nombre y cifra el saludo dentro de un proceso del pool.

    Returns:
        Tuple[str, str]: Nombre en claro y saludo cifrado en Base64.

    """

    name = oaep_decrypt(encrypted_name, _worker_key)
    return name, private_encrypt(f"Hello {name}", _worker_key)


def _error(status: int, error: str, details: Optional[str] = None) -> web.Response:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return web.json_response(body, status=status)


async def index(request: web.Request) -> web.Response:
    """Comprobación de vida del servicio."""

    return web.Response(text="Hello aiohttp!")


async def encrypt_greeting(request: web.Request) -> web.Response:
    """Descifra el nombre recibido y responde con el saludo cifrado.

    Args:
        request (web.Request): Petición POST con el nombre cifrado.

    Returns:
        web.Response: JSON con ``encryptedGreeting`` o con el error producido.

    """

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Request body must be valid JSON")

    encrypted_name = body.get("name") if isinstance(body, dict) else None
    if not encrypted_name or not isinstance(encrypted_name, str):
        return _error(400, 'Missing "name" field in request body')

    loop = asyncio.get_running_loop()
    try:
        name, encrypted_greeting = await loop.run_in_executor(
            request.app[EXECUTOR], _process_name, encrypted_name
        )
    except GreetingCryptoError as exc:
        logger.error("Error processing request: %s", exc)
        return _error(500, "Failed to process encrypted data", str(exc))

    logger.info("Greeting encrypted for a %d-byte name", len(name.encode("utf-8")))
    response = EncryptedResponse(
        encrypted_greeting=encrypted_greeting,
        message="Greeting encrypted successfully",
    )
    return web.json_response(response.model_dump(by_alias=True))


def _worker_pool(workers: int):
    """Contexto de arranque/parada del pool de procesos de la aplicación."""

    async def ctx(app: web.Application) -> AsyncIterator[None]:
        # Cada proceso recibe el PEM y carga la clave una sola vez.
        pem = app[PRIVATE_KEY].private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        executor = ProcessPoolExecutor(
            max_workers=workers, initializer=_init_worker, initargs=(pem,)
        )
        app[EXECUTOR] = executor
        logger.debug("Started private-key worker pool with %d processes", workers)
        yield
        executor.shutdown(wait=True, cancel_futures=True)

    return ctx


def create_app(private_key_pem: str, workers: Optional[int] = None) -> web.Application:
    """Construye la aplicación interpretando una sola vez la clave privada.

    Args:
        private_key_pem (str): Clave privada RSA en PEM.
        workers (Optional[int]): Procesos del pool; por defecto ``SERVER_WORKERS``.

    Returns:
        web.Application: Aplicación lista para ``web.run_app``.

    Raises:
        KeyParseError: Si la clave privada no es una clave RSA válida.

    """

    app = web.Application()
    app[PRIVATE_KEY] = load_private_key(private_key_pem)
    app.cleanup_ctx.append(_worker_pool(max(1, workers or config.SERVER_WORKERS)))
    app.router.add_get("/", index)
    app.router.add_post("/encrypt-greeting", encrypt_greeting)
    return app


def main() -> None:
    """Arranca el servidor con la clave privada definida en el entorno."""

    configure_logging(config.LOG_LEVEL)
    try:
        app = create_app(config.get_private_key_from_env())
    except (ConfigError, KeyParseError) as exc:
        logger.error("Failed to load RSA private key from environment: %s", exc)
        sys.exit(1)

    logger.info("Private key loaded successfully")
    web.run_app(app, host=config.SERVER_HOST, port=config.SERVER_PORT)


if __name__ == "__main__":
    main()
