import logging
from typing import Optional, Union

from . import utils
from .digest import HashAlgorithm, HashEngine, canonicalize_algorithm, hmac_digest
from .secret import Secret

log = logging.getLogger(__name__)

DEFAULT_ISSUER = ""
DEFAULT_LABEL = "OTPAuth"
DEFAULT_ISSUER_IN_LABEL = True
DEFAULT_ALGORITHM = HashAlgorithm.SHA1
DEFAULT_DIGITS = 6
DEFAULT_COUNTER = 0
DEFAULT_PERIOD = 30
DEFAULT_WINDOW = 1


def generate_otp(
    secret: Secret,
    counter: int,
    algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    engine: Optional[HashEngine] = None,
) -> str:
    """
    Computes the RFC 4226 token for one counter value.

    :param secret: shared key
    :param counter: the HMAC counter value to use as the OTP input.
        Usually either the HOTP counter, or the TOTP time step
    :param algorithm: hash algorithm of the HMAC
    :param digits: length of the token
    :param engine: Hash Engine override
    :returns: ``digits`` decimal characters, left-padded with zeros
    """
    hmac_hash = hmac_digest(algorithm, secret.bytes, utils.int_to_bytestring(counter), engine=engine)
    offset = hmac_hash[-1] & 0xF
    code = (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )
    return str(code % 10**digits).zfill(digits)


def validate_otp(
    token: str,
    secret: Secret,
    counter: int = DEFAULT_COUNTER,
    algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    window: int = DEFAULT_WINDOW,
    engine: Optional[HashEngine] = None,
) -> Optional[int]:
    """
    Looks for ``token`` among the counters ``counter - window`` to
    ``counter + window``.

    Every counter in the window is checked, in ascending order, and the
    *last* match is reported; callers must not rely on the earliest one.

    :param token: the token to check
    :param counter: reference counter value
    :param window: number of counters to check on each side of ``counter``
    :returns: offset of the matching counter from ``counter``, or None
        when nothing matched (including tokens of the wrong length)
    """
    token = str(token)
    if len(token) != digits:
        return None

    delta = None
    for i in range(counter - window, counter + window + 1):
        candidate = generate_otp(secret, i, algorithm=algorithm, digits=digits, engine=engine)
        if utils.strings_equal(token, candidate):
            delta = i - counter
    if delta is not None:
        log.debug("token matched at offset %d", delta)
    return delta


class OTP(object):
    """
    Base class for OTP handlers.

    Holds the configuration shared by HOTP and TOTP.
    """

    def __init__(
        self,
        issuer: str = DEFAULT_ISSUER,
        label: str = DEFAULT_LABEL,
        issuer_in_label: bool = DEFAULT_ISSUER_IN_LABEL,
        secret: Union[None, str, Secret] = None,
        algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
        digits: int = DEFAULT_DIGITS,
        engine: Optional[HashEngine] = None,
    ) -> None:
        """
        :param issuer: issuer, shown as the entry title in authenticator apps
        :param label: account name
        :param issuer_in_label: prefix the URI label with ``issuer:``
        :param secret: Secret, or base32 string; random when omitted
        :param algorithm: hash algorithm name, e.g. "SHA1", "sha-256"
        :param digits: number of integers in the OTP. Some apps expect this
            to be 6 digits, others support more.
        :param engine: Hash Engine override for this instance
        """
        if digits < 1:
            raise ValueError("digits must be a positive integer")
        if secret is None:
            secret = Secret()
        elif isinstance(secret, str):
            secret = Secret.from_base32(secret)

        self.issuer = issuer
        self.label = label
        self.issuer_in_label = issuer_in_label
        self.secret = secret
        self.algorithm = canonicalize_algorithm(algorithm)
        self.digits = digits
        self.engine = engine

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
        """
        return generate_otp(self.secret, input, algorithm=self.algorithm, digits=self.digits, engine=self.engine)

    def provisioning_uri(self) -> str:
        """
        Returns the provisioning URI for the OTP. This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        See also:
            https://github.com/google/google-authenticator/wiki/Key-Uri-Format
        """
        from .uri import stringify

        return stringify(self)

    def __str__(self) -> str:
        return self.provisioning_uri()
