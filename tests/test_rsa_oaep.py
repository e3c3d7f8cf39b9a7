# --------------------------------------------------------------
# File: test_rsa_oaep.py
# Description: Pruebas del cifrado RSA-OAEP SHA-256 con la clave pública.
# --------------------------------------------------------------

import base64

import pytest
from Crypto.Cipher import PKCS1_OAEP
from Crypto.Hash import SHA256
from Crypto.PublicKey import RSA
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, padding

from core.errors import EncodeError, EncryptionError, KeyParseError, PlaintextTooLongError
from core.rsa_oaep import OaepEncoder, rsa_oaep_encrypt

OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


def _decrypt(keypair, ciphertext_b64: str) -> bytes:
    """Descifra con la clave privada de prueba usando la implementación de referencia.

    Args:
        keypair (RsaKeyPair): Par de claves de prueba.
        ciphertext_b64 (str): Ciphertext en Base64.

    Returns:
        bytes: Texto en claro recuperado.
    """
    return keypair.private_key.decrypt(base64.b64decode(ciphertext_b64), OAEP)


@pytest.mark.parametrize("plaintext", ["Alice", "", "ñandú 🔐 Zoë"])
def test_oaep_roundtrip_with_private_key(keypair, plaintext):
    """Comprueba que la clave privada recupere lo cifrado por el codificador.

    Returns:
        None: Las aserciones comparan el texto original con el descifrado.
    """
    ciphertext = rsa_oaep_encrypt(plaintext, keypair.public_pem)
    assert _decrypt(keypair, ciphertext) == plaintext.encode("utf-8")


def test_ciphertext_has_modulus_length(keypair):
    """Verifica que el ciphertext ocupe exactamente la longitud del módulo.

    Returns:
        None: Las aserciones evalúan la longitud y el relleno Base64.
    """
    ciphertext = rsa_oaep_encrypt("Bob", keypair.public_pem)
    raw = base64.b64decode(ciphertext, validate=True)
    assert len(raw) == keypair.modulus_bytes
    assert len(ciphertext) % 4 == 0


def test_oaep_is_not_deterministic(keypair):
    """Garantiza que cifrar dos veces el mismo texto produzca salidas distintas.

    Returns:
        None: Las aserciones comparan ambos ciphertexts.
    """
    first = rsa_oaep_encrypt("same", keypair.public_pem)
    second = rsa_oaep_encrypt("same", keypair.public_pem)
    assert first != second
    assert _decrypt(keypair, first) == _decrypt(keypair, second) == b"same"


def test_length_bound(keypair):
    """Acepta ``k - 66`` bytes y rechaza ``k - 65`` bytes.

    Returns:
        None: Las aserciones cubren ambos lados del límite.
    """
    k = keypair.modulus_bytes
    accepted = "a" * (k - 2 * 32 - 2)
    ciphertext = rsa_oaep_encrypt(accepted, keypair.public_pem)
    assert _decrypt(keypair, ciphertext) == accepted.encode()

    with pytest.raises(PlaintextTooLongError) as info:
        rsa_oaep_encrypt("a" * (k - 2 * 32 - 1), keypair.public_pem)
    assert info.value.capacity == k - 66
    assert info.value.length == k - 65


def test_length_bound_counts_utf8_bytes(small_keypair):
    """Comprueba que el límite se mida en bytes UTF-8 y no en caracteres.

    Returns:
        None: Se espera rechazo aunque el número de caracteres quepa.
    """
    capacity = small_keypair.modulus_bytes - 66
    with pytest.raises(PlaintextTooLongError):
        rsa_oaep_encrypt("é" * (capacity // 2 + 1), small_keypair.public_pem)


def test_injected_rng_makes_output_reproducible(small_keypair):
    """Verifica que una fuente aleatoria fija produzca un ciphertext reproducible.

    Returns:
        None: Las aserciones comparan las dos salidas y su descifrado.
    """
    def fixed(size):
        return b"\x42" * size

    first = rsa_oaep_encrypt("Alice", small_keypair.public_pem, rng=fixed)
    second = rsa_oaep_encrypt("Alice", small_keypair.public_pem, rng=fixed)
    assert first == second
    assert _decrypt(small_keypair, first) == b"Alice"


def test_ciphertext_decrypts_with_pycryptodome(small_keypair):
    """El ciphertext también lo descifra ``PKCS1_OAEP`` de pycryptodome con SHA-256.

    Returns:
        None: La aserción compara el texto recuperado.
    """
    private = RSA.import_key(small_keypair.private_pem)
    cipher = PKCS1_OAEP.new(private, hashAlgo=SHA256)
    ciphertext = rsa_oaep_encrypt("Zoë", small_keypair.public_pem)
    assert cipher.decrypt(base64.b64decode(ciphertext)) == "Zoë".encode("utf-8")


def test_rng_returning_wrong_size_raises(small_keypair):
    """Una semilla de longitud incorrecta se reporta como EncryptionError.

    Returns:
        None: Se espera la excepción tipada.
    """
    encoder = OaepEncoder.from_pem(small_keypair.public_pem, rng=lambda size: b"\x00")
    with pytest.raises(EncryptionError):
        encoder.encode("Alice")


def test_rng_failure_raises_encryption_error(small_keypair):
    """Un fallo de la fuente aleatoria se envuelve en EncryptionError.

    Returns:
        None: Se espera la excepción tipada con la causa original.
    """
    def broken(size):
        raise OSError("entropy exhausted")

    encoder = OaepEncoder.from_pem(small_keypair.public_pem, rng=broken)
    with pytest.raises(EncryptionError) as info:
        encoder.encode("Alice")
    assert isinstance(info.value.__cause__, OSError)


def test_garbage_pem_raises_key_parse_error():
    """Un PEM inválido produce KeyParseError, que también es EncodeError.

    Returns:
        None: Se espera la excepción tipada.
    """
    with pytest.raises(KeyParseError) as info:
        rsa_oaep_encrypt("Alice", "garbage")
    assert isinstance(info.value, EncodeError)


def test_non_rsa_key_is_rejected():
    """Una clave pública Ed25519 no es válida para el codificador.

    Returns:
        None: Se espera KeyParseError.
    """
    pub_pem = ed25519.Ed25519PrivateKey.generate().public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    with pytest.raises(KeyParseError):
        rsa_oaep_encrypt("Alice", pub_pem)


def test_encoder_is_reusable(small_keypair):
    """Un mismo codificador sirve para varias llamadas independientes.

    Returns:
        None: Las aserciones descifran cada resultado.
    """
    encoder = OaepEncoder.from_pem(small_keypair.public_pem)
    for name in ("Alice", "Bob", "Carol"):
        assert _decrypt(small_keypair, encoder.encode(name)) == name.encode()
