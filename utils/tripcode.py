"""
Tripcode Module

Derives a display name and tripcode from a raw poster name such as
"Anon#secret" or "Anon#secret#supersecret".

The normal tripcode is the classic futaba-style DES crypt tripcode. The
secure tripcode is an MD5 of the secret plus a server-side salt. Output must
stay byte-for-byte identical to tripcodes generated by earlier deployments.
"""

import hashlib
import re
from typing import Optional, Tuple

from services.protocols import LegacyCrypt
from utils.crypto import DesLegacyCrypt

SEPARATORS = ('!', '#')

# Character-wise translation applied to the secret before hashing. Earlier
# deployments ran a per-character translate over "&amp;" -> "&" and
# "&#44;" -> ", ", which maps only '&' -> ',' and '#' -> ' '.
_SECRET_TRANSLATION = str.maketrans({'&': ',', '#': ' '})

_SALT_INVALID = re.compile(r'[^.-z]')
_SALT_TRANSLATION = str.maketrans(":;<=>?@[\\]^_`", "ABCDEFGabcdef")

_default_crypt = DesLegacyCrypt()


def _split_name(raw: str) -> Optional[Tuple[str, str, str]]:
    """Split raw input into (name, normal secret, secure secret), or None."""
    first = None
    for separator in SEPARATORS:
        pos = raw.find(separator)
        if pos != -1 and (first is None or pos < first):
            first = pos

    if first is None:
        return None

    separator = raw[first]
    second = raw.rfind(separator, first + 1)

    name = raw[:first]
    if second == -1:
        return name, raw[first + 1:], ""
    return name, raw[first + 1:second], raw[second + 1:]


def normal_tripcode(secret: str, crypt: LegacyCrypt = _default_crypt) -> str:
    """Return the 10 character DES tripcode for a secret."""
    secret = secret.translate(_SECRET_TRANSLATION)
    # salt positions are byte offsets into the UTF-8 secret
    salt = (secret.encode('utf-8') + b"H.")[1:3].decode('latin-1')
    salt = _SALT_INVALID.sub('.', salt)
    salt = salt.translate(_SALT_TRANSLATION)
    return crypt.crypt(secret, salt)[-10:]


def secure_tripcode(secret: str, secure_salt: str) -> str:
    """Return the 10 character salted MD5 tripcode for a secret."""
    digest = hashlib.md5((secret + secure_salt).encode('utf-8')).hexdigest()
    return digest[2:12]


def generate_tripcode(
    raw: str,
    secure_salt: str,
    crypt: LegacyCrypt = _default_crypt
) -> Tuple[str, Optional[str]]:
    """
    Generate a display name and tripcode from a raw name.

    The earliest '!' or '#' starts the secret. If the same separator occurs
    again, the last occurrence splits the secret into a normal and a secure
    part. A secure part is prefixed with '!!' when a normal tripcode was
    generated, '!' otherwise.

    Args:
        raw: The name field as submitted.
        secure_salt: Server-held salt for secure tripcodes.
        crypt: The DES crypt implementation.

    Returns:
        Tuple[str, Optional[str]]: (display name, tripcode). If no tripcode
            could be generated the raw input is returned unchanged with None.
    """
    parts = _split_name(raw)
    if parts is None:
        return raw, None

    name, normal_secret, secure_secret = parts

    tripcode = ""
    if normal_secret:
        tripcode = normal_tripcode(normal_secret, crypt)

    if secure_secret:
        tripcode += ("!!" if normal_secret else "!") + secure_tripcode(secure_secret, secure_salt)

    if not tripcode:
        return raw, None

    return name, tripcode
