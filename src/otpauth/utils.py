import base64
from hmac import compare_digest

from .exceptions import InvalidCharacter

# RFC 4648 base32 alphabet; the otpauth scheme never emits "=" padding.
BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_BASE32_SYMBOLS = frozenset(BASE32_ALPHABET + BASE32_ALPHABET.lower())

# len % 8 values whose last symbol holds no complete byte
_DANGLING_LENGTHS = (1, 3, 6)


def base32_encode(data: bytes) -> str:
    """
    Encodes bytes as unpadded RFC 4648 base32.

    The final partial symbol is filled with zero bits, so
    ``base32_decode(base32_encode(data)) == data`` for any input.
    """
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def base32_decode(s: str) -> bytes:
    """
    Decodes a base32 string, ignoring case, spaces and trailing padding.

    Symbols that do not complete a full byte are discarded, so the result
    is always ``len(s) * 5 // 8`` bytes long (after cleanup).

    :param s: base32 text, e.g. ``"JBSWY3DPEHPK3PXP"``
    :raises InvalidCharacter: on the first symbol outside ``A-Z2-7``
    """
    s = s.replace(" ", "").rstrip("=")
    for ch in s:
        if ch not in _BASE32_SYMBOLS:
            raise InvalidCharacter(ch)
    s = s.upper()

    # b32decode only accepts whole 8-symbol blocks with RFC-legal padding.
    if len(s) % 8 in _DANGLING_LENGTHS:
        s = s[:-1]
    missing_padding = len(s) % 8
    if missing_padding != 0:
        s += "=" * (8 - missing_padding)
    return base64.b32decode(s)


def bytes_to_hex(data: bytes) -> str:
    return bytes(data).hex()


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret.

    The value is reduced modulo ``2 ** (8 * padding)`` so every integer maps
    onto exactly ``padding`` big-endian bytes; negative values wrap around as
    two's complement.
    """
    return (i % (1 << (8 * padding))).to_bytes(padding, "big")


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string. Both strings
    must already have the same length; anything else is a caller bug.
    """
    if len(s1) != len(s2):
        raise ValueError("strings_equal() requires inputs of equal length")
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
