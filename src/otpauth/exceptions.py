class OTPError(ValueError):
    """
    Base class for errors raised by otpauth.

    Subclasses ValueError, so callers that already catch ValueError for bad
    secrets or URIs keep working.
    """


class InvalidCharacter(OTPError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__("Invalid base32 character: {!r}".format(char))


class UnsupportedAlgorithm(OTPError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Unknown hash algorithm: {!r}".format(name))


class HashBackendUnavailable(OTPError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("No hash implementation available for {}".format(name))


class CryptoUnavailable(OTPError):
    def __init__(self) -> None:
        super().__init__("No secure random source available")


class InvalidURIFormat(OTPError):
    def __init__(self) -> None:
        super().__init__("Invalid otpauth URI format")


class UnknownOTPType(OTPError):
    def __init__(self, otp_type: str) -> None:
        self.otp_type = otp_type
        super().__init__("Unknown OTP type: {!r}".format(otp_type))


class MissingOrInvalidParameter(OTPError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Missing or invalid '{}' parameter".format(name))
