"""
Votifier Protocol
Greeting handshake and vote block encoding for the v1 (RSA) protocol
"""

from dataclasses import dataclass

from crypto_utils import CryptoUtils
from errors import ProtocolError, ValidationError, EncodingError


VOTE_MARKER = "VOTE"
GREETING_CHUNK_SIZE = 16


@dataclass(frozen=True)
class VoteRecord:
    """A single vote notification"""
    service_name: str
    username: str
    address: str
    timestamp: str

    def fields(self):
        """Field values in wire order, marker first"""
        return [VOTE_MARKER, self.service_name, self.username, self.address, self.timestamp]


class ProtocolMessage:
    """Protocol message builder and parser"""

    @staticmethod
    def parse_greeting(line):
        """
        Extract the server version from a greeting line
        Args:
            line: greeting bytes, newline excluded
        Returns: version string
        """
        text = line.decode('utf-8', errors='replace')
        tokens = text.split(' ')
        if len(tokens) < 2:
            raise ProtocolError(f"malformed greeting {text!r}")
        return ' '.join(tokens[1:]).strip()

    @staticmethod
    def vote_block(record, block_size):
        """
        Serialize a vote into a zero-padded plaintext block
        Args:
            record: VoteRecord
            block_size: exact length of the returned block
        Returns: bytes of length block_size
        """
        buf = bytearray()
        for part in record.fields():
            try:
                buf += part.encode('utf-8')
            except UnicodeEncodeError as e:
                raise EncodingError(f"vote field {part!r} is not valid UTF-8 text") from e
            buf += b'\n'

        if len(buf) > block_size:
            raise EncodingError(
                f"vote is {len(buf)} bytes, block holds at most {block_size}"
            )

        buf += bytes(block_size - len(buf))
        return bytes(buf)


class MessageValidator:
    """Validates vote records"""

    @staticmethod
    def validate_vote(record):
        """Raise ValidationError naming the first blank field"""
        for name in ('service_name', 'username', 'address', 'timestamp'):
            if not getattr(record, name):
                raise ValidationError(f"invalid vote component {name}; is blank")


def read_greeting(stream):
    """
    Read the server greeting and return its version
    Args:
        stream: connected socket (anything with recv)
    Returns: version string, e.g. "2.13" for "VOTING/1.0 2.13\\r\\n"
    """
    buf = bytearray()
    while True:
        chunk = stream.recv(GREETING_CHUNK_SIZE)
        if not chunk:
            raise ConnectionError("connection closed before greeting was received")
        buf += chunk
        if b'\n' in chunk:
            break

    line = bytes(buf).split(b'\n', 1)[0]
    return ProtocolMessage.parse_greeting(line)


def send_vote(record, public_key, stream):
    """
    Encrypt a vote and write it to the stream
    Args:
        record: VoteRecord
        public_key: server RSA public key
        stream: connected socket (anything with sendall)
    """
    # before key sizing, so a blank field is reported ahead of a bad key
    MessageValidator.validate_vote(record)
    block_size = CryptoUtils.max_payload_size(public_key)
    block = ProtocolMessage.vote_block(record, block_size)
    ciphertext = CryptoUtils.rsa_encrypt(public_key, block)
    stream.sendall(ciphertext)
