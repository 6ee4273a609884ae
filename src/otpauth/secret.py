import os
from hmac import compare_digest
from typing import Optional

from . import utils
from .exceptions import CryptoUnavailable

DEFAULT_SECRET_SIZE = 20  # 160 bits, the RFC 4226 recommendation


def random_bytes(size: int) -> bytes:
    try:
        return os.urandom(size)
    except NotImplementedError as e:
        raise CryptoUnavailable() from e


class Secret(object):
    """
    Shared OTP key.

    Holds the raw key bytes together with their base32 and hex renderings.
    Instances are immutable and may be shared freely between HOTP/TOTP
    objects and threads.

    >>> Secret.from_base32("JBSWY3DPEHPK3PXP").hex
    '48656c6c6f21deadbeef'
    """

    __slots__ = ("_bytes", "_base32", "_hex")

    def __init__(self, buffer: Optional[bytes] = None, size: int = DEFAULT_SECRET_SIZE) -> None:
        """
        :param buffer: existing key bytes; a random key is drawn when omitted
        :param size: length in bytes of the random key, defaults to 20
        """
        if buffer is None:
            if size < 1:
                raise ValueError("size must be a positive integer")
            buffer = random_bytes(size)
        buffer = bytes(buffer)
        if not buffer:
            raise ValueError("secret must not be empty")

        # Secrets are small, so both views are rendered once up front.
        object.__setattr__(self, "_bytes", buffer)
        object.__setattr__(self, "_base32", utils.base32_encode(buffer))
        object.__setattr__(self, "_hex", utils.bytes_to_hex(buffer))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Secret objects are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Secret objects are immutable")

    @classmethod
    def from_base32(cls, s: str) -> "Secret":
        """
        :param s: base32 encoded key; case, spaces and padding are ignored
        :raises InvalidCharacter: if ``s`` is not base32
        """
        return cls(buffer=utils.base32_decode(s))

    @property
    def bytes(self) -> bytes:
        return self._bytes

    @property
    def base32(self) -> str:
        return self._base32

    @property
    def hex(self) -> str:
        return self._hex

    def __len__(self) -> int:
        return len(self._bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return compare_digest(self._bytes, other._bytes)

    def __hash__(self) -> int:
        return hash(self._bytes)

    def __repr__(self) -> str:
        return "<Secret: {} bytes>".format(len(self._bytes))
