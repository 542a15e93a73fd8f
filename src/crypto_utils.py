"""
Cryptographic Utilities
Implements RSA PKCS#1 v1.5 encryption and Votifier key encoding
"""

import base64
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa, padding
from cryptography.hazmat.backends import default_backend

from errors import CryptoError


# PKCS#1 v1.5 encryption padding overhead in bytes
PKCS1_OVERHEAD = 11


class CryptoUtils:
    """Cryptographic operations handler"""

    @staticmethod
    def key_size_bytes(public_key):
        """Modulus length of an RSA key in bytes"""
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise CryptoError(f"expected an RSA public key, got {type(public_key).__name__}")
        return (public_key.key_size + 7) // 8

    @staticmethod
    def max_payload_size(public_key):
        """
        Largest plaintext a single PKCS#1 v1.5 block can carry
        245 bytes for a 2048-bit key
        """
        return CryptoUtils.key_size_bytes(public_key) - PKCS1_OVERHEAD

    @staticmethod
    def rsa_encrypt(public_key, plaintext):
        """
        Encrypt one block with RSA PKCS#1 v1.5
        Args:
            public_key: RSA public key object
            plaintext: bytes, at most max_payload_size(public_key) long
        Returns: ciphertext bytes, one modulus in length
        """
        try:
            return public_key.encrypt(plaintext, padding.PKCS1v15())
        except (ValueError, TypeError) as e:
            raise CryptoError(f"encryption failed: {e}") from e

    @staticmethod
    def rsa_decrypt(private_key, ciphertext):
        """Decrypt one RSA PKCS#1 v1.5 block"""
        try:
            return private_key.decrypt(ciphertext, padding.PKCS1v15())
        except (ValueError, TypeError) as e:
            raise CryptoError(f"decryption failed: {e}") from e

    @staticmethod
    def generate_keypair(key_size=2048):
        """
        Generate an RSA keypair
        Returns: (private_key, public_key)
        """
        private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=key_size,
            backend=default_backend()
        )
        return private_key, private_key.public_key()

    @staticmethod
    def decode_public_key(data):
        """
        Parse a public key
        Accepts the Votifier public.key format (base64 of DER
        SubjectPublicKeyInfo) or a PEM public key.
        Args:
            data: bytes or str
        Returns: RSA public key object
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        data = data.strip()

        try:
            if data.startswith(b'-----BEGIN'):
                key = serialization.load_pem_public_key(data, backend=default_backend())
            else:
                der = base64.b64decode(b''.join(data.split()), validate=True)
                key = serialization.load_der_public_key(der, backend=default_backend())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CryptoError(f"could not decode public key: {e}") from e

        if not isinstance(key, rsa.RSAPublicKey):
            raise CryptoError(f"expected an RSA public key, got {type(key).__name__}")
        return key

    @staticmethod
    def load_public_key(key_path):
        """Load RSA public key from a Votifier public.key or PEM file"""
        with open(key_path, 'rb') as f:
            return CryptoUtils.decode_public_key(f.read())

    @staticmethod
    def encode_public_key(public_key):
        """Encode a public key in Votifier public.key format"""
        der = public_key.public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo
        )
        return base64.b64encode(der).decode('ascii')

    @staticmethod
    def encode_private_key(private_key):
        """Encode a private key in Votifier private.key format (base64 PKCS#8 DER)"""
        der = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        )
        return base64.b64encode(der).decode('ascii')

    @staticmethod
    def load_private_key(key_path):
        """Load RSA private key from a Votifier private.key file"""
        with open(key_path, 'rb') as f:
            data = f.read().strip()
        try:
            der = base64.b64decode(b''.join(data.split()), validate=True)
            return serialization.load_der_private_key(der, password=None, backend=default_backend())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CryptoError(f"could not decode private key: {e}") from e
