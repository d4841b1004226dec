# socialgraph/core/phone.py

"""
Phone number -> matching key.

Both the device-side client and the server hash with this module, so the
algorithm is a contract: strip every non-digit, keep the last 10 digits,
SHA-256 the ASCII digit string, lowercase hex. Numbers that share their last
10 digits share a hash. A different algorithm must ship as hash_phone_v2
next to v1, never as an edit of v1.
"""

import hashlib
import re

HASH_VERSION = 1
HASH_HEX_LENGTH = 64
SIGNIFICANT_DIGITS = 10

# ASCII digits only; str patterns would treat other scripts' digits as \d
_NON_DIGIT = re.compile(r"[^0-9]")
PHONE_HASH_PATTERN = r"^[0-9a-f]{64}$"


def normalize_phone(raw_phone: str) -> str:
    digits = _NON_DIGIT.sub("", raw_phone)
    return digits[-SIGNIFICANT_DIGITS:]


def hash_phone_v1(raw_phone: str) -> str:
    # Total: "" and short numbers hash whatever digits remain
    normalized = normalize_phone(raw_phone)
    return hashlib.sha256(normalized.encode("ascii")).hexdigest()


hash_phone = hash_phone_v1
