import hashlib

import pytest

from koblitz.config import get_config, set_config
from koblitz.hash import DEFAULT_PROVIDER, set_provider

ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# fixed spread of private keys: tiny, mid-range, near the order
PRIVATE_KEYS = [
    1,
    2,
    3,
    0x42,
    0xB7E151628AED2A6ABF7158809CF4F3C762E7160F38B4DA56A784D9045190CFEF,
    int.from_bytes(hashlib.sha256(b"koblitz/test/key/1").digest(), "big") % ORDER,
    int.from_bytes(hashlib.sha256(b"koblitz/test/key/2").digest(), "big") % ORDER,
    0x7F << 248 | (2**248 - 1),
    ORDER - 2,
    ORDER - 1,
]

MESSAGE_HASHES = [
    bytes(32),
    bytes(range(32)),
    hashlib.sha256(b"test").digest(),
    hashlib.sha256(b"sample").digest(),
    hashlib.sha256(b"hello world").digest(),
]


@pytest.fixture
def restore_provider():
    """Put the default hash provider back after the test."""
    yield
    set_provider(DEFAULT_PROVIDER)


@pytest.fixture
def restore_config():
    saved = get_config()
    yield
    set_config(saved)
