"""
Hash algorithm names and the HMAC construction used by HOTP/TOTP.

The raw hash primitive comes from a Hash Engine supplied by the host
application; by default that is :class:`HashlibEngine`. Only the RFC 2104
padding and composition is done here.

See also:
    https://tools.ietf.org/html/rfc2104
"""

import hashlib
import logging
from enum import Enum
from typing import Optional, Protocol, Union

from .exceptions import HashBackendUnavailable, UnsupportedAlgorithm

log = logging.getLogger(__name__)


class HashAlgorithm(str, Enum):
    SHA1 = "SHA1"
    SHA224 = "SHA224"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"
    SHA3_224 = "SHA3-224"
    SHA3_256 = "SHA3-256"
    SHA3_384 = "SHA3-384"
    SHA3_512 = "SHA3-512"

    def __str__(self) -> str:
        return self.value


_SHA3_NAMES = {"SHA3-224", "SHA3-256", "SHA3-384", "SHA3-512"}
_SHA2_NAMES = {"SHA1", "SHA224", "SHA256", "SHA384", "SHA512"}


def canonicalize_algorithm(name: Union[str, HashAlgorithm]) -> HashAlgorithm:
    """
    Maps a user supplied algorithm name onto a :class:`HashAlgorithm`.

    ``"sha-256"``, ``"SHA256"`` and ``"Sha256"`` all give ``SHA256``; SHA-3
    names must keep their hyphen (``"sha3-256"``).

    :raises UnsupportedAlgorithm: for anything else, e.g. ``"MD5"``
    """
    if isinstance(name, HashAlgorithm):
        return name
    upper = str(name).upper()
    if upper.startswith("SHA3-"):
        if upper in _SHA3_NAMES:
            return HashAlgorithm(upper)
    else:
        simple = upper.replace("-", "")
        if simple in _SHA2_NAMES:
            return HashAlgorithm(simple)
    raise UnsupportedAlgorithm(str(name))


class HashEngine(Protocol):
    """
    A keyed-hash backend: plain digests plus the block size HMAC needs.
    """

    def digest(self, algorithm: HashAlgorithm, message: bytes) -> bytes:
        ...

    def block_size(self, algorithm: HashAlgorithm) -> int:
        ...


# hashlib constructor names, one per algorithm
_HASHLIB_NAMES = {
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


class HashlibEngine(object):
    """
    Hash Engine backed by :mod:`hashlib`.
    """

    def _new(self, algorithm: HashAlgorithm, data: bytes = b""):
        try:
            name = _HASHLIB_NAMES[algorithm]
        except KeyError:
            raise UnsupportedAlgorithm(str(algorithm)) from None
        try:
            return hashlib.new(name, data)
        except ValueError as e:
            raise HashBackendUnavailable(str(algorithm)) from e

    def digest(self, algorithm: HashAlgorithm, message: bytes) -> bytes:
        return self._new(algorithm, message).digest()

    def block_size(self, algorithm: HashAlgorithm) -> int:
        # 64 for SHA-1/SHA-224/SHA-256, 128 for SHA-384/SHA-512, and the
        # sponge rate for SHA-3 (144, 136, 104, 72)
        return self._new(algorithm).block_size


_default_engine: HashEngine = HashlibEngine()


def get_default_engine() -> HashEngine:
    return _default_engine


def set_default_engine(engine: HashEngine) -> None:
    """
    Installs the Hash Engine used when callers do not pass ``engine=``.

    Meant to be called once while the application is being wired up.
    """
    global _default_engine
    log.debug("installing hash engine %r", engine)
    _default_engine = engine


def hmac_digest(
    algorithm: Union[str, HashAlgorithm],
    key: bytes,
    message: bytes,
    engine: Optional[HashEngine] = None,
) -> bytes:
    """
    HMAC as specified by RFC 2104.

    :param algorithm: hash algorithm; strings are canonicalized first
    :param key: HMAC key, pre-hashed when longer than the block size
    :param message: data to authenticate
    :param engine: Hash Engine to use, defaults to :func:`get_default_engine`
    :returns: the raw HMAC digest
    """
    algorithm = canonicalize_algorithm(algorithm)
    if engine is None:
        engine = _default_engine

    block_size = engine.block_size(algorithm)
    key = bytes(key)
    if len(key) > block_size:
        key = engine.digest(algorithm, key)
    key = key.ljust(block_size, b"\0")

    inner_pad = bytes(b ^ 0x36 for b in key)
    outer_pad = bytes(b ^ 0x5C for b in key)

    inner = engine.digest(algorithm, inner_pad + bytes(message))
    return engine.digest(algorithm, outer_pad + inner)
