from random import SystemRandom
from typing import Sequence

from . import uri as uri
from .digest import HashAlgorithm as HashAlgorithm
from .digest import HashEngine as HashEngine
from .digest import HashlibEngine as HashlibEngine
from .digest import canonicalize_algorithm as canonicalize_algorithm
from .digest import hmac_digest as hmac_digest
from .digest import set_default_engine as set_default_engine
from .exceptions import CryptoUnavailable as CryptoUnavailable
from .exceptions import HashBackendUnavailable as HashBackendUnavailable
from .exceptions import InvalidCharacter as InvalidCharacter
from .exceptions import InvalidURIFormat as InvalidURIFormat
from .exceptions import MissingOrInvalidParameter as MissingOrInvalidParameter
from .exceptions import OTPError as OTPError
from .exceptions import UnknownOTPType as UnknownOTPType
from .exceptions import UnsupportedAlgorithm as UnsupportedAlgorithm
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .secret import Secret as Secret
from .totp import TOTP as TOTP
from .uri import parse as parse_uri
from .uri import stringify as build_uri
from .utils import BASE32_ALPHABET

random = SystemRandom()


def random_base32(length: int = 32, chars: Sequence[str] = BASE32_ALPHABET) -> str:
    # Note: the otpauth scheme DOES NOT use base32 padding for secret lengths not divisible by 8.
    # Some third-party tools have bugs when dealing with such secrets.
    if length < 32:
        raise ValueError("Secrets should be at least 160 bits")

    return "".join(random.choice(chars) for _ in range(length))


def random_hex(length: int = 40, chars: Sequence[str] = "abcdef0123456789") -> str:
    if length < 40:
        raise ValueError("Secrets should be at least 160 bits")
    return random_base32(length=length, chars=chars)
