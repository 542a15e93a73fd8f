#!/usr/bin/env python3
"""
Mock Votifier Server
Accepts one connection, sends a greeting and decrypts the vote it receives
Run from an environment where the project is installed (pip install -e .)
"""

import socket
import sys

from crypto_utils import CryptoUtils
from errors import CryptoError

GREETING = b"VOTIFIER 1.9\n"


def recv_exact(sock, length):
    """Receive exactly length bytes"""
    data = b''
    while len(data) < length:
        chunk = sock.recv(length - len(data))
        if not chunk:
            raise ConnectionError("Socket closed")
        data += chunk
    return data


def serve_once(host, port, private_key):
    """Handle a single vote and print its fields"""
    block_size = CryptoUtils.key_size_bytes(private_key.public_key())

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind((host, port))
        server.listen(1)
        print(f"[*] Listening on {host}:{port}")

        client_socket, addr = server.accept()
        with client_socket:
            print(f"\n[*] New connection from {addr}")
            client_socket.sendall(GREETING)

            ciphertext = recv_exact(client_socket, block_size)
            plaintext = CryptoUtils.rsa_decrypt(private_key, ciphertext)

    fields = plaintext.rstrip(b'\x00').decode('utf-8').split('\n')
    names = ["Marker", "Service", "Username", "Address", "Timestamp"]
    print("[+] Vote received:")
    for name, value in zip(names, fields):
        print(f"    {name}: {value}")


def main():
    if len(sys.argv) != 4:
        print("Usage: python scripts/mock_server.py <private_key_file> <host> <port>")
        print("\nExample:")
        print("  python scripts/mock_server.py rsa/private.key 127.0.0.1 8192")
        sys.exit(1)

    try:
        private_key = CryptoUtils.load_private_key(sys.argv[1])
        serve_once(sys.argv[2], int(sys.argv[3]), private_key)
    except FileNotFoundError:
        print(f"[!] File not found: {sys.argv[1]}")
        sys.exit(1)
    except (OSError, CryptoError) as e:
        print(f"[!] Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
