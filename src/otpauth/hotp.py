from typing import Optional, Union

from . import utils
from .digest import HashAlgorithm, HashEngine
from .otp import (
    DEFAULT_ALGORITHM,
    DEFAULT_COUNTER,
    DEFAULT_DIGITS,
    DEFAULT_ISSUER,
    DEFAULT_ISSUER_IN_LABEL,
    DEFAULT_LABEL,
    DEFAULT_WINDOW,
    OTP,
    validate_otp,
)
from .secret import Secret


class HOTP(OTP):
    """
    Handler for HMAC-based OTP counters (RFC 4226).

    ``counter`` is plain mutable state advanced by :meth:`generate`. An
    instance is not safe for concurrent ``generate()`` calls; give each
    serial context its own instance, guard it with a lock, or keep the
    counter yourself and call :meth:`at` / :func:`otpauth.otp.generate_otp`.
    """

    def __init__(
        self,
        issuer: str = DEFAULT_ISSUER,
        label: str = DEFAULT_LABEL,
        issuer_in_label: bool = DEFAULT_ISSUER_IN_LABEL,
        secret: Union[None, str, Secret] = None,
        algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
        digits: int = DEFAULT_DIGITS,
        counter: int = DEFAULT_COUNTER,
        engine: Optional[HashEngine] = None,
    ) -> None:
        """
        :param secret: Secret, or key in base32 format
        :param counter: starting HMAC counter value, defaults to 0
        :param digits: number of integers in the OTP
        :param algorithm: hash algorithm to use in the HMAC (expected to be SHA1)
        :param label: account name
        :param issuer: issuer
        """
        self.counter = counter
        super().__init__(
            issuer=issuer,
            label=label,
            issuer_in_label=issuer_in_label,
            secret=secret,
            algorithm=algorithm,
            digits=digits,
            engine=engine,
        )

    def generate(self, counter: Optional[int] = None) -> str:
        """
        Generates a token.

        Without an explicit ``counter`` the bound counter is used and then
        incremented.

        >>> hotp = HOTP(secret="GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ")
        >>> hotp.generate(), hotp.counter
        ('755224', 1)
        """
        if counter is None:
            counter = self.counter
            self.counter += 1
        return self.generate_otp(counter)

    def validate(self, token: str, counter: Optional[int] = None, window: int = DEFAULT_WINDOW) -> Optional[int]:
        """
        Checks a token against the counters around ``counter``.

        :param token: the OTP to check against
        :param counter: reference counter, defaults to the bound counter
            (which is left unchanged)
        :param window: counters to check on each side
        :returns: counter offset of the match, or None
        """
        if counter is None:
            counter = self.counter
        return validate_otp(
            token,
            self.secret,
            counter=counter,
            algorithm=self.algorithm,
            digits=self.digits,
            window=window,
            engine=self.engine,
        )

    def at(self, count: int) -> str:
        """
        Generates the OTP for the given count, leaving the bound counter alone.

        :param count: the OTP HMAC counter
        :returns: OTP
        """
        return self.generate_otp(count)

    def verify(self, otp: str, counter: int) -> bool:
        """
        Verifies the OTP passed in against the OTP for one exact counter.

        :param otp: the OTP to check against
        :param counter: the OTP HMAC counter
        """
        otp = str(otp)
        if len(otp) != self.digits:
            return False
        return utils.strings_equal(otp, self.at(counter))
