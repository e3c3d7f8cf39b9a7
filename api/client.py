# --------------------------------------------------------------
# File: client.py
# Description: Adaptador de transporte HTTP asíncrono para el saludo cifrado.
# --------------------------------------------------------------
"""Cliente aiohttp que cifra el nombre, llama al servidor y descifra la respuesta."""

import asyncio
from typing import Optional

import aiohttp
from pydantic import ValidationError

from core import config
from core.errors import ResponseFormatError, TransportError
from core.log import get_logger
from core.models import EncryptedRequest, EncryptedResponse
from core.rsa_keys import PemLike, load_public_key
from core.rsa_oaep import OaepEncoder, RandomSource
from core.rsa_raw import RawRsaDecoder

logger = get_logger(__name__)

GREETING_PATH = "/encrypt-greeting"


class GreetingClient:
    """Cliente del servicio de saludos cifrados.

    Solo necesita la clave pública: cifra las peticiones con OAEP y recupera
    las respuestas, cifradas en crudo con la clave privada, con ``c^e mod n``.
    Las operaciones RSA se ejecutan en un hilo aparte para no bloquear el
    bucle de eventos.

    Example:
        >>> async with GreetingClient(public_pem) as client:
        ...     greeting = await client.send_encrypted_request("Alice")

    """

    def __init__(
        self,
        public_key_pem: PemLike,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        decode_strict: bool = False,
        rng: Optional[RandomSource] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        public_key = load_public_key(public_key_pem)
        self._encoder = OaepEncoder(public_key, rng=rng)
        self._decoder = RawRsaDecoder(public_key, strict=decode_strict)
        self._base_url = (base_url or config.GREETING_API_URL).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout or config.REQUEST_TIMEOUT)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "GreetingClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Cierra la sesión HTTP si la creó el propio cliente."""

        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def send_encrypted_request(self, name: str) -> str:
        """Envía el nombre cifrado y devuelve el saludo descifrado.

        Args:
            name (str): Nombre en claro del usuario.

        Returns:
            str: Saludo recuperado de la respuesta del servidor.

        Raises:
            ValueError: Si el nombre está vacío.
            EncodeError: Si el nombre no se puede cifrar.
            TransportError: Si la petición falla o el estado HTTP no es 2xx.
            ResponseFormatError: Si la respuesta no tiene ``encryptedGreeting``.
            DecodeError: Si el saludo recibido no se puede recuperar.

        """

        if not name:
            raise ValueError("Please enter a name")

        encrypted_name = await asyncio.to_thread(self._encoder.encode, name)
        payload = EncryptedRequest(name=encrypted_name).model_dump()
        url = f"{self._base_url}{GREETING_PATH}"
        session = self._ensure_session()

        try:
            async with session.post(url, json=payload) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"Server error: {response.status}", status=response.status
                    )
                try:
                    body = await response.json(content_type=None)
                except ValueError as exc:
                    raise ResponseFormatError(
                        f"Failed to parse response: {exc}", status=response.status
                    ) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Failed to send request: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError("Failed to send request: timed out") from exc

        try:
            data = EncryptedResponse.model_validate(body)
        except ValidationError as exc:
            raise ResponseFormatError(f"Failed to parse response: {exc}") from exc

        logger.debug("Received encrypted greeting from %s", url)
        return await asyncio.to_thread(self._decoder.decode, data.encrypted_greeting)
