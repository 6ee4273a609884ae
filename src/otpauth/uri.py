"""
Reading and writing ``otpauth://`` key URIs.

The URL looks like this::

    otpauth://totp/FooCorp:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=FooCorp
              ^    ^       ^                 ^
              |    |       |                 query parameters (secret, issuer, ...)
              |    |       account name (the label)
              |    issuer prefix, optional
              OTP type (totp or hotp)

See also:
    https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

import logging
import re
from typing import Dict, List, Tuple, Union
from urllib.parse import quote, unquote, urlencode

from .exceptions import InvalidURIFormat, MissingOrInvalidParameter, UnknownOTPType
from .hotp import HOTP
from .secret import Secret
from .totp import TOTP
from .utils import base32_decode

log = logging.getLogger(__name__)

OTPURI_REGEX = re.compile(
    r"otpauth://([A-Z0-9]+)/(.+)\?([A-Z0-9.~_-]+=[^?&]*(?:&[A-Z0-9.~_-]+=[^?&]*)*)",
    re.IGNORECASE | re.ASCII,
)
SECRET_REGEX = re.compile(r"[2-7A-Z]+=*", re.IGNORECASE | re.ASCII)
INTEGER_REGEX = re.compile(r"[+-]?[0-9]+")
POSITIVE_INTEGER_REGEX = re.compile(r"\+?[1-9][0-9]*")
LABEL_SEPARATOR = re.compile("%3A", re.IGNORECASE)


def _parse_params(raw_params: str) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for pair in raw_params.split("&"):
        key, _, value = pair.partition("=")
        # keys are case-insensitive; a repeated key overrides earlier ones
        params[unquote(key).lower()] = unquote(value)
    return params


def parse(uri: str) -> Union[HOTP, TOTP]:
    """
    Parses the provisioning URI for the OTP; works for either TOTP or HOTP.

    :param uri: the hotp/totp URI to parse
    :returns: HOTP or TOTP object
    :raises InvalidURIFormat: when ``uri`` is not an otpauth URI at all
    :raises UnknownOTPType: for types other than hotp/totp
    :raises MissingOrInvalidParameter: for a missing or malformed
        ``secret``, ``counter``, ``period`` or ``digits``
    :raises UnsupportedAlgorithm: for an unknown ``algorithm``
    """
    match = OTPURI_REGEX.fullmatch(uri)
    if match is None:
        raise InvalidURIFormat()
    otp_type, raw_label, raw_params = match.groups()
    params = _parse_params(raw_params)
    otp_type = otp_type.lower()

    # Data we'll pass to the correct constructor
    otp_data: Dict[str, Union[str, int, bool, Secret]] = {}

    if otp_type == "hotp":
        otp_class = HOTP
        counter = params.get("counter")
        if counter is None or not INTEGER_REGEX.fullmatch(counter):
            raise MissingOrInvalidParameter("counter")
        otp_data["counter"] = int(counter)
    elif otp_type == "totp":
        otp_class = TOTP
        period = params.get("period")
        if period is not None:
            if not POSITIVE_INTEGER_REGEX.fullmatch(period):
                raise MissingOrInvalidParameter("period")
            otp_data["period"] = int(period)
    else:
        raise UnknownOTPType(otp_type)

    if params.get("issuer"):
        otp_data["issuer"] = params["issuer"]

    # Parse issuer/accountname info
    if ":" in raw_label:
        label_parts = raw_label.split(":", 1)
    else:
        # an encoded colon only separates an issuer that the issuer
        # parameter confirms; otherwise it belongs to the account name
        label_parts = LABEL_SEPARATOR.split(raw_label, maxsplit=1)
        if len(label_parts) == 2 and unquote(label_parts[0]).strip() != otp_data.get("issuer"):
            label_parts = [raw_label]
    if len(label_parts) == 2:
        issuer_from_label, label = (unquote(part).strip() for part in label_parts)
        otp_data["label"] = label
        # the issuer parameter takes precedence over the label prefix
        if "issuer" not in otp_data:
            otp_data["issuer"] = issuer_from_label
    else:
        otp_data["label"] = unquote(label_parts[0]).strip()
        if "issuer" in otp_data:
            otp_data["issuer_in_label"] = False

    secret = params.get("secret")
    if secret is None or not SECRET_REGEX.fullmatch(secret):
        raise MissingOrInvalidParameter("secret")
    try:
        otp_data["secret"] = Secret(buffer=base32_decode(secret))
    except ValueError as e:
        # empty once decoded
        raise MissingOrInvalidParameter("secret") from e

    if "algorithm" in params:
        otp_data["algorithm"] = params["algorithm"]

    digits = params.get("digits")
    if digits is not None:
        if not POSITIVE_INTEGER_REGEX.fullmatch(digits):
            raise MissingOrInvalidParameter("digits")
        otp_data["digits"] = int(digits)

    log.debug("parsed %s URI for label %r", otp_type, otp_data["label"])
    return otp_class(**otp_data)  # type: ignore[arg-type]


def stringify(otp: Union[HOTP, TOTP]) -> str:
    """
    Returns the provisioning URI for an HOTP or TOTP object.

    This can then be encoded in a QR Code and used to provision the Google
    Authenticator app.

    :param otp: the object to serialize
    :returns: provisioning uri
    """
    if isinstance(otp, HOTP):
        otp_type = "hotp"
    elif isinstance(otp, TOTP):
        otp_type = "totp"
    else:
        raise TypeError("Expected an HOTP or TOTP object, got {!r}".format(type(otp).__name__))

    label = quote(otp.label, safe="")
    if otp.issuer and otp.issuer_in_label:
        label = quote(otp.issuer, safe="") + ":" + label

    url_args: List[Tuple[str, Union[str, int]]] = [
        ("secret", otp.secret.base32),
        ("algorithm", otp.algorithm.value),
        ("digits", otp.digits),
    ]
    if isinstance(otp, HOTP):
        url_args.append(("counter", otp.counter))
    else:
        url_args.append(("period", otp.period))
    if otp.issuer:
        url_args.append(("issuer", otp.issuer))

    return "otpauth://{0}/{1}?{2}".format(otp_type, label, urlencode(url_args).replace("+", "%20"))
