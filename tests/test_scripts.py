import importlib.util
from pathlib import Path

from crypto_utils import CryptoUtils

SCRIPTS = Path(__file__).resolve().parent.parent / 'scripts'


def load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS / f'{name}.py')
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_gen_keys_writes_usable_pair(tmp_path, capsys):
    gen_keys = load_script('gen_keys')
    gen_keys.generate_keys(str(tmp_path / 'rsa'), 1024)

    public_key = CryptoUtils.load_public_key(tmp_path / 'rsa' / 'public.key')
    private_key = CryptoUtils.load_private_key(tmp_path / 'rsa' / 'private.key')
    assert CryptoUtils.rsa_decrypt(private_key, CryptoUtils.rsa_encrypt(public_key, b"vote")) == b"vote"
    assert "Max vote block: 117 bytes" in capsys.readouterr().out


def test_mock_server_recv_exact():
    mock_server = load_script('mock_server')

    class Stream:
        chunks = [b"ab", b"cd", b"e"]

        def recv(self, bufsize):
            return self.chunks.pop(0)

    assert mock_server.recv_exact(Stream(), 5) == b"abcde"
