import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from crypto_utils import CryptoUtils
from errors import CryptoError


def test_payload_size_2048(public_key):
    assert CryptoUtils.key_size_bytes(public_key) == 256
    assert CryptoUtils.max_payload_size(public_key) == 245


def test_votifier_key_roundtrip(public_key):
    encoded = CryptoUtils.encode_public_key(public_key)
    decoded = CryptoUtils.decode_public_key(encoded)
    assert decoded.public_numbers() == public_key.public_numbers()


def test_decode_tolerates_wrapped_base64(public_key):
    encoded = CryptoUtils.encode_public_key(public_key)
    wrapped = "\n".join(encoded[i:i + 64] for i in range(0, len(encoded), 64)) + "\n"
    decoded = CryptoUtils.decode_public_key(wrapped.encode('ascii'))
    assert decoded.public_numbers() == public_key.public_numbers()


def test_decode_pem(public_key):
    pem = public_key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo
    )
    decoded = CryptoUtils.decode_public_key(pem)
    assert decoded.public_numbers() == public_key.public_numbers()


@pytest.mark.parametrize("data", [b"", b"not base64 at all!", base64.b64encode(b"not a DER key")])
def test_decode_garbage(data):
    with pytest.raises(CryptoError):
        CryptoUtils.decode_public_key(data)


def test_decode_rejects_non_rsa_key():
    ec_key = ec.generate_private_key(ec.SECP256R1()).public_key()
    der = ec_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo
    )
    with pytest.raises(CryptoError, match="RSA"):
        CryptoUtils.decode_public_key(base64.b64encode(der))


def test_load_key_files(tmp_path, keypair):
    private_key, public_key = keypair
    (tmp_path / 'public.key').write_text(CryptoUtils.encode_public_key(public_key))
    (tmp_path / 'private.key').write_text(CryptoUtils.encode_private_key(private_key))

    loaded_public = CryptoUtils.load_public_key(tmp_path / 'public.key')
    loaded_private = CryptoUtils.load_private_key(tmp_path / 'private.key')

    ciphertext = CryptoUtils.rsa_encrypt(loaded_public, b"vote")
    assert CryptoUtils.rsa_decrypt(loaded_private, ciphertext) == b"vote"


def test_load_missing_key(tmp_path):
    with pytest.raises(FileNotFoundError):
        CryptoUtils.load_public_key(tmp_path / 'missing.key')


def test_encrypt_oversized_block(public_key):
    with pytest.raises(CryptoError):
        CryptoUtils.rsa_encrypt(public_key, bytes(246))

