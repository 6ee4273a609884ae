import time
from typing import Optional, Union

from .digest import HashAlgorithm, HashEngine
from .otp import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    DEFAULT_ISSUER,
    DEFAULT_ISSUER_IN_LABEL,
    DEFAULT_LABEL,
    DEFAULT_PERIOD,
    DEFAULT_WINDOW,
    OTP,
    generate_otp,
    validate_otp,
)
from .secret import Secret


def _now_ms() -> int:
    return int(time.time() * 1000)


def timecode(period: int = DEFAULT_PERIOD, timestamp: Optional[int] = None) -> int:
    """
    Number of whole periods elapsed since the Unix epoch.

    :param period: time step in seconds
    :param timestamp: milliseconds since the epoch, defaults to now
    """
    if timestamp is None:
        timestamp = _now_ms()
    return int(timestamp // (period * 1000))


def remaining(period: int = DEFAULT_PERIOD, timestamp: Optional[int] = None) -> int:
    """
    Milliseconds left until the next time step begins.
    """
    if timestamp is None:
        timestamp = _now_ms()
    step = period * 1000
    return int(step - timestamp % step)


def generate_totp(
    secret: Secret,
    algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
    timestamp: Optional[int] = None,
    engine: Optional[HashEngine] = None,
) -> str:
    return generate_otp(
        secret,
        timecode(period, timestamp),
        algorithm=algorithm,
        digits=digits,
        engine=engine,
    )


def validate_totp(
    token: str,
    secret: Secret,
    algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_PERIOD,
    timestamp: Optional[int] = None,
    window: int = DEFAULT_WINDOW,
    engine: Optional[HashEngine] = None,
) -> Optional[int]:
    """
    :returns: offset of the matching time step in whole periods, or None
    """
    return validate_otp(
        token,
        secret,
        counter=timecode(period, timestamp),
        algorithm=algorithm,
        digits=digits,
        window=window,
        engine=engine,
    )


class TOTP(OTP):
    """
    Handler for time-based OTP counters (RFC 6238).

    Holds no mutable state, so one instance can be shared between threads.
    All timestamps are integer milliseconds since the Unix epoch.
    """

    def __init__(
        self,
        issuer: str = DEFAULT_ISSUER,
        label: str = DEFAULT_LABEL,
        issuer_in_label: bool = DEFAULT_ISSUER_IN_LABEL,
        secret: Union[None, str, Secret] = None,
        algorithm: Union[str, HashAlgorithm] = DEFAULT_ALGORITHM,
        digits: int = DEFAULT_DIGITS,
        period: int = DEFAULT_PERIOD,
        engine: Optional[HashEngine] = None,
    ) -> None:
        """
        :param period: the time step in seconds, defaults to 30
        """
        if period <= 0:
            raise ValueError("period must be a positive integer")
        self.period = period
        super().__init__(
            issuer=issuer,
            label=label,
            issuer_in_label=issuer_in_label,
            secret=secret,
            algorithm=algorithm,
            digits=digits,
            engine=engine,
        )

    def counter(self, timestamp: Optional[int] = None) -> int:
        return timecode(self.period, timestamp)

    def remaining(self, timestamp: Optional[int] = None) -> int:
        return remaining(self.period, timestamp)

    def generate(self, timestamp: Optional[int] = None) -> str:
        """
        Generates the token for ``timestamp`` (milliseconds), defaulting to now.
        """
        return self.generate_otp(self.counter(timestamp))

    def validate(
        self, token: str, timestamp: Optional[int] = None, window: int = DEFAULT_WINDOW
    ) -> Optional[int]:
        """
        :param token: the OTP to check against
        :param timestamp: reference time in milliseconds, defaults to now
        :param window: time steps to check on each side
        :returns: offset in periods of the matching step, or None
        """
        return validate_otp(
            token,
            self.secret,
            counter=self.counter(timestamp),
            algorithm=self.algorithm,
            digits=self.digits,
            window=window,
            engine=self.engine,
        )

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.generate()

    def at(self, timestamp: int) -> str:
        return self.generate(timestamp)

    def verify(self, otp: str, timestamp: Optional[int] = None, window: int = DEFAULT_WINDOW) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param timestamp: time to check OTP at in milliseconds, defaults to now
        :param window: time steps of clock drift to accept on each side
        """
        return self.validate(otp, timestamp=timestamp, window=window) is not None
