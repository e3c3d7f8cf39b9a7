# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas con pares de claves RSA de varios tamaños.
# --------------------------------------------------------------

from dataclasses import dataclass
from typing import Iterator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

KEY_SIZES = (2048, 4096)


@dataclass(frozen=True)
class RsaKeyPair:
    """Par de claves de prueba junto con sus PEM.

    Attributes:
        private_key (rsa.RSAPrivateKey): Clave privada de ``cryptography``.
        private_pem (str): Clave privada PKCS#8 en PEM.
        public_pem (str): Clave pública SPKI en PEM.
    """

    private_key: rsa.RSAPrivateKey
    private_pem: str
    public_pem: str

    @property
    def modulus_bytes(self) -> int:
        return (self.private_key.key_size + 7) // 8

    def raw_private(self, block: bytes) -> bytes:
        """Aplica ``m^d mod n`` sobre un bloque y devuelve ``modulus_bytes`` bytes."""
        numbers = self.private_key.private_numbers()
        n = numbers.public_numbers.n
        value = pow(int.from_bytes(block, "big"), numbers.d, n)
        return value.to_bytes(self.modulus_bytes, "big")


def _generate(bits: int) -> RsaKeyPair:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return RsaKeyPair(private_key, private_pem, public_pem)


@pytest.fixture(scope="session")
def keypair_cache():
    """Cachea los pares generados para no repetir la generación por test.

    Returns:
        Dict[object, RsaKeyPair]: Pares indexados por tamaño en bits o por nombre.
    """
    return {}


@pytest.fixture(params=KEY_SIZES, ids=lambda bits: f"rsa{bits}")
def keypair(request, keypair_cache) -> RsaKeyPair:
    """Devuelve un par RSA para cada tamaño de módulo parametrizado.

    Args:
        request (pytest.FixtureRequest): Contiene el tamaño en bits.
        keypair_cache (Dict[int, RsaKeyPair]): Caché de sesión.

    Returns:
        RsaKeyPair: Par de claves del tamaño solicitado.
    """
    bits = request.param
    if bits not in keypair_cache:
        keypair_cache[bits] = _generate(bits)
    return keypair_cache[bits]


@pytest.fixture
def small_keypair(keypair_cache) -> RsaKeyPair:
    """Par de 2048 bits para pruebas que no dependen del tamaño."""
    if 2048 not in keypair_cache:
        keypair_cache[2048] = _generate(2048)
    return keypair_cache[2048]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch) -> Iterator[None]:
    """Elimina las claves del entorno real para que cada prueba las fije.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar variables de entorno.

    Returns:
        Iterator[None]: Control del fixture autouse durante cada test.
    """
    monkeypatch.delenv("RSA_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("RSA_PRIVATE_KEY", raising=False)
    yield


@pytest.fixture
def other_keypair(keypair_cache) -> RsaKeyPair:
    """Segundo par de 2048 bits, distinto del de ``small_keypair``."""
    if "other" not in keypair_cache:
        keypair_cache["other"] = _generate(2048)
    return keypair_cache["other"]
