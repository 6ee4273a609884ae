import pytest

from otpauth import Secret
from otpauth import secret as secret_module
from otpauth.exceptions import CryptoUnavailable, InvalidCharacter

KEY4 = "JBSWY3DPEHPK3PXP"
KEY4_RAW = b"Hello!\xde\xad\xbe\xef"


def test_from_bytes():
    secret = Secret(KEY4_RAW)
    assert secret.bytes == KEY4_RAW
    assert secret.base32 == KEY4
    assert secret.hex == "48656c6c6f21deadbeef"
    assert len(secret) == 10


def test_from_base32():
    secret = Secret.from_base32("jbsw y3dp ehpk 3pxp")
    assert secret.bytes == KEY4_RAW
    assert secret.base32 == KEY4

    with pytest.raises(InvalidCharacter):
        Secret.from_base32("JBSWY3DPEHPK3PX0")


def test_random():
    secret = Secret()
    assert len(secret.bytes) == 20
    assert len(secret.base32) == 32
    assert len(secret.hex) == 40

    assert len(Secret(size=32).bytes) == 32
    assert Secret() != Secret()


def test_rejects_empty():
    with pytest.raises(ValueError):
        Secret(b"")
    with pytest.raises(ValueError):
        Secret(size=0)
    with pytest.raises(ValueError):
        Secret.from_base32("A")


def test_immutable():
    secret = Secret(KEY4_RAW)
    with pytest.raises(AttributeError):
        secret.base32 = "AAAA"
    with pytest.raises(AttributeError):
        secret._bytes = b"other"
    with pytest.raises(AttributeError):
        del secret._hex
    assert secret.base32 == KEY4


def test_buffer_is_copied():
    buffer = bytearray(KEY4_RAW)
    secret = Secret(buffer)
    buffer[0] = 0
    assert secret.bytes == KEY4_RAW


def test_equality():
    assert Secret(KEY4_RAW) == Secret.from_base32(KEY4)
    assert hash(Secret(KEY4_RAW)) == hash(Secret.from_base32(KEY4))
    assert Secret(KEY4_RAW) != Secret(b"other")
    assert Secret(KEY4_RAW) != KEY4_RAW


def test_repr_hides_key():
    assert KEY4 not in repr(Secret(KEY4_RAW))
    assert "10 bytes" in repr(Secret(KEY4_RAW))


def test_crypto_unavailable(monkeypatch):
    def no_urandom(size):
        raise NotImplementedError()

    monkeypatch.setattr(secret_module.os, "urandom", no_urandom)
    with pytest.raises(CryptoUnavailable):
        Secret()
