import hashlib
import hmac

import pytest

from otpauth import digest
from otpauth.digest import HashAlgorithm, HashlibEngine, canonicalize_algorithm, hmac_digest
from otpauth.exceptions import HashBackendUnavailable, UnsupportedAlgorithm

STDLIB_NAMES = {
    HashAlgorithm.SHA1: "sha1",
    HashAlgorithm.SHA224: "sha224",
    HashAlgorithm.SHA256: "sha256",
    HashAlgorithm.SHA384: "sha384",
    HashAlgorithm.SHA512: "sha512",
    HashAlgorithm.SHA3_224: "sha3_224",
    HashAlgorithm.SHA3_256: "sha3_256",
    HashAlgorithm.SHA3_384: "sha3_384",
    HashAlgorithm.SHA3_512: "sha3_512",
}


class CountingEngine(HashlibEngine):
    def __init__(self):
        self.calls = 0

    def digest(self, algorithm, message):
        self.calls += 1
        return super().digest(algorithm, message)


@pytest.fixture
def restore_engine():
    engine = digest.get_default_engine()
    yield
    digest.set_default_engine(engine)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("SHA1", HashAlgorithm.SHA1),
        ("sha1", HashAlgorithm.SHA1),
        ("SHA-1", HashAlgorithm.SHA1),
        ("sha-224", HashAlgorithm.SHA224),
        ("Sha256", HashAlgorithm.SHA256),
        ("SHA-384", HashAlgorithm.SHA384),
        ("sha512", HashAlgorithm.SHA512),
        ("sha3-224", HashAlgorithm.SHA3_224),
        ("SHA3-256", HashAlgorithm.SHA3_256),
        ("Sha3-384", HashAlgorithm.SHA3_384),
        ("sha3-512", HashAlgorithm.SHA3_512),
        (HashAlgorithm.SHA256, HashAlgorithm.SHA256),
    ],
)
def test_canonicalize_algorithm(name, expected):
    assert canonicalize_algorithm(name) is expected


@pytest.mark.parametrize("name", ["MD5", "", "SHA", "SHA3256", "SHA3-1024", "SHA-3-256", "sha256 ", "SHAKE128"])
def test_canonicalize_algorithm_rejects(name):
    with pytest.raises(UnsupportedAlgorithm) as excinfo:
        canonicalize_algorithm(name)
    assert excinfo.value.name == name


def test_algorithm_renders_as_name():
    assert str(HashAlgorithm.SHA3_256) == "SHA3-256"
    assert HashAlgorithm.SHA1 == "SHA1"


@pytest.mark.parametrize(
    "algorithm, size",
    [
        (HashAlgorithm.SHA1, 64),
        (HashAlgorithm.SHA224, 64),
        (HashAlgorithm.SHA256, 64),
        (HashAlgorithm.SHA384, 128),
        (HashAlgorithm.SHA512, 128),
        (HashAlgorithm.SHA3_224, 144),
        (HashAlgorithm.SHA3_256, 136),
        (HashAlgorithm.SHA3_384, 104),
        (HashAlgorithm.SHA3_512, 72),
    ],
)
def test_block_size(algorithm, size):
    assert HashlibEngine().block_size(algorithm) == size


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
@pytest.mark.parametrize("key_size", [0, 1, 20, 64, 71, 72, 73, 128, 144, 145, 300])
def test_hmac_matches_stdlib(algorithm, key_size):
    key = bytes(i % 256 for i in range(key_size))
    message = b"\x00\x00\x00\x00\x00\x00\x00\x01"
    expected = hmac.new(key, message, STDLIB_NAMES[algorithm]).digest()
    assert hmac_digest(algorithm, key, message) == expected


def test_hmac_canonicalizes_names():
    key = b"12345678901234567890"
    assert hmac_digest("sha-256", key, b"msg") == hmac.new(key, b"msg", hashlib.sha256).digest()
    with pytest.raises(UnsupportedAlgorithm):
        hmac_digest("MD5", key, b"msg")


def test_hmac_prehashes_long_keys():
    engine = CountingEngine()
    hmac_digest(HashAlgorithm.SHA1, b"k" * 64, b"msg", engine=engine)
    assert engine.calls == 2

    engine = CountingEngine()
    hmac_digest(HashAlgorithm.SHA1, b"k" * 65, b"msg", engine=engine)
    assert engine.calls == 3


def test_default_engine(restore_engine):
    engine = CountingEngine()
    digest.set_default_engine(engine)
    assert digest.get_default_engine() is engine
    hmac_digest("SHA1", b"key", b"msg")
    assert engine.calls == 2


def test_backend_unavailable(monkeypatch):
    def missing(name, data=b""):
        raise ValueError("unsupported hash type " + name)

    monkeypatch.setattr(digest.hashlib, "new", missing)
    with pytest.raises(HashBackendUnavailable) as excinfo:
        hmac_digest(HashAlgorithm.SHA3_256, b"key", b"msg")
    assert excinfo.value.name == "SHA3-256"
