"""
Votifier Vote Client
Connects to a Votifier server and sends RSA-encrypted vote notifications
"""

import argparse
import math
import os
import re
import socket
import sys
import time
from datetime import datetime
from dotenv import load_dotenv

from crypto_utils import CryptoUtils
from errors import VoteError
from protocol import VoteRecord, read_greeting, send_vote

# Load environment variables
load_dotenv()

MAX_USERNAME_LENGTH = 16
MAX_COUNT = 32767

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ms|s|m|h)')
_BARE_SECONDS = re.compile(r'\d+(?:\.\d*)?|\.\d+')
_DURATION_UNITS = {'ms': 0.001, 's': 1, 'm': 60, 'h': 3600}
# longest duration a signed 64-bit nanosecond count can hold
MAX_DURATION = (2 ** 63 - 1) / 1e9


def parse_duration(value):
    """
    Parse a duration into seconds
    Accepts bare seconds ("1.5") or unit suffixed parts ("500ms", "1m30s")
    """
    value = value.strip()
    if _BARE_SECONDS.fullmatch(value):
        seconds = float(value)
    else:
        parts = _DURATION_PART.findall(value)
        if not parts or ''.join(n + u for n, u in parts) != value:
            raise ValueError(f"invalid duration {value!r}")
        seconds = sum(float(n) * _DURATION_UNITS[u] for n, u in parts)
    if not math.isfinite(seconds) or seconds > MAX_DURATION:
        raise ValueError(f"duration out of range {value!r}")
    return seconds


def parse_target(target):
    """
    Split host:port, accepting [v6]:port
    Returns: (host, port)
    """
    host, sep, raw_port = target.rpartition(':')
    if not sep or not host:
        raise ValueError(f"missing port in target {target!r}")
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    elif ':' in host:
        raise ValueError(f"IPv6 targets must be bracketed: {target!r}")

    try:
        port = int(raw_port)
    except ValueError:
        raise ValueError(f"invalid port {raw_port!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port {port} out of range")
    return host, port


def unix_date(now=None):
    """Format a timestamp like the Unix date command: Mon Jan  2 15:04:05 MST 2006"""
    if now is None:
        now = datetime.now().astimezone()
    return f"{now:%a %b} {now.day:2d} {now:%H:%M:%S} {now.strftime('%Z') or 'UTC'} {now.year}"


class VoteClient:
    """Sends votes to a single Votifier server"""

    def __init__(self, host, port, public_key, timeout=None):
        self.host = host
        self.port = port
        self.public_key = public_key
        self.timeout = timeout

    @property
    def target(self):
        return f"{self.host}:{self.port}"

    def connect(self):
        """Open a TCP connection to the server"""
        return socket.create_connection((self.host, self.port), timeout=self.timeout)

    def send(self, record):
        """
        Send one vote over a fresh connection
        Returns: server version from the greeting
        """
        sock = self.connect()
        try:
            version = read_greeting(sock)
            print(f"[+] Connected to votifier at {self.target} (version {version})")
            send_vote(record, self.public_key, sock)
        finally:
            sock.close()
        print(f"[+] Sent vote to {self.target}!")
        return version

    def run(self, record_factory, count=1, delay=0.0):
        """
        Send count votes sequentially, sleeping delay seconds between attempts
        A failed attempt is reported and the loop moves on.
        Returns: number of votes sent successfully
        """
        sent = 0
        for i in range(count):
            if count > 1:
                print(f"[*] Sending vote #{i + 1}...")
            try:
                self.send(record_factory())
                sent += 1
            except (OSError, VoteError) as e:
                print(f"[!] Vote to {self.target} failed: {e}", file=sys.stderr)
            if i != count - 1:
                time.sleep(delay)

        if count > 1:
            print(f"[*] Sent {sent}/{count} votes")
        return sent


def _positive_count(value):
    count = int(value)
    if not 0 < count <= MAX_COUNT:
        raise argparse.ArgumentTypeError(f"count must be between 1 and {MAX_COUNT}")
    return count


def _duration(value):
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser():
    """Command line parser, defaults taken from the environment"""
    parser = argparse.ArgumentParser(
        prog='votifier-send',
        description='Send Votifier v1 vote notifications to a server'
    )
    parser.add_argument('--key', default=os.getenv('VOTIFIER_KEY', 'public.key'),
                        help='the public key file location')
    parser.add_argument('--target', default=os.getenv('VOTIFIER_TARGET'),
                        help='the target (host:port) to send the vote to')
    parser.add_argument('--username', default=os.getenv('VOTIFIER_USERNAME', 'Player'),
                        help='the username of the player who sent the vote')
    parser.add_argument('--site', default=os.getenv('VOTIFIER_SITE', 'test.twister915.me'),
                        help='the name of the website sending the vote')
    parser.add_argument('--address', default=os.getenv('VOTIFIER_ADDRESS', '127.0.0.1'),
                        help='the IP of the person making the vote')
    parser.add_argument('--count', type=_positive_count, default=os.getenv('VOTIFIER_COUNT', '1'),
                        help='the number of votes to send')
    parser.add_argument('--delay', type=_duration, default=os.getenv('VOTIFIER_DELAY', '1s'),
                        help='time between votes in succession (e.g. 1s, 500ms)')
    parser.add_argument('--timeout', type=_duration, default=os.getenv('VOTIFIER_TIMEOUT', '10s'),
                        help='socket timeout for each connection')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.target:
        parser.error("you need to specify your target (--target host:port)")
    try:
        host, port = parse_target(args.target)
    except ValueError as e:
        parser.error(f"could not parse the target: {e}")

    if not 1 <= len(args.username) <= MAX_USERNAME_LENGTH:
        parser.error(f"the username {args.username!r} is not valid")

    try:
        public_key = CryptoUtils.load_public_key(args.key)
    except OSError as e:
        print(f"[!] Public key could not be read at {args.key}: {e}", file=sys.stderr)
        return 2
    except VoteError as e:
        print(f"[!] Public key at {args.key} is invalid: {e}", file=sys.stderr)
        return 2

    client = VoteClient(host, port, public_key, timeout=args.timeout or None)

    def record_factory():
        return VoteRecord(args.site, args.username, args.address, unix_date())

    sent = client.run(record_factory, count=args.count, delay=args.delay)
    return 0 if sent == args.count else 1


if __name__ == '__main__':
    sys.exit(main())
