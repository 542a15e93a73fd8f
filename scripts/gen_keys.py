#!/usr/bin/env python3
"""
Generate Votifier Key Pair
Creates an RSA key pair in the Votifier public.key / private.key format
Run from an environment where the project is installed (pip install -e .)
"""

import os
import sys

from crypto_utils import CryptoUtils


def generate_keys(out_dir='rsa', key_size=2048):
    """Generate key pair and write public.key and private.key"""

    # Create output directory if it doesn't exist
    os.makedirs(out_dir, exist_ok=True)

    print(f"[*] Generating {key_size}-bit RSA key pair...")
    private_key, public_key = CryptoUtils.generate_keypair(key_size)

    public_path = os.path.join(out_dir, 'public.key')
    with open(public_path, 'w') as f:
        f.write(CryptoUtils.encode_public_key(public_key))
    print(f"[+] Public key saved to {public_path}")

    private_path = os.path.join(out_dir, 'private.key')
    with open(private_path, 'w') as f:
        f.write(CryptoUtils.encode_private_key(private_key))
    print(f"[+] Private key saved to {private_path}")

    print(f"\n[*] Max vote block: {CryptoUtils.max_payload_size(public_key)} bytes")
    print("[!] Keep private.key secure - never commit to version control")


if __name__ == '__main__':
    if len(sys.argv) > 3:
        print("Usage: python scripts/gen_keys.py [out_dir] [key_size]")
        sys.exit(1)
    out_dir = sys.argv[1] if len(sys.argv) > 1 else 'rsa'
    key_size = int(sys.argv[2]) if len(sys.argv) > 2 else 2048
    generate_keys(out_dir, key_size)
