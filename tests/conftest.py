import pytest

from crypto_utils import CryptoUtils


@pytest.fixture(scope='session')
def keypair():
    """2048-bit RSA keypair shared by the whole test session"""
    return CryptoUtils.generate_keypair(2048)


@pytest.fixture(scope='session')
def private_key(keypair):
    return keypair[0]


@pytest.fixture(scope='session')
def public_key(keypair):
    return keypair[1]


class ChunkedStream:
    """Fake socket serving recv() from a list of chunks"""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.recv_calls = 0

    def recv(self, bufsize):
        self.recv_calls += 1
        if not self.chunks:
            return b''
        return self.chunks.pop(0)


class RecordingStream:
    """Fake socket recording sendall() payloads"""

    def __init__(self):
        self.writes = []

    def sendall(self, data):
        self.writes.append(data)


@pytest.fixture
def recording_stream():
    return RecordingStream()
