"""
Deterministic fingerprints for feeds and items.

Fingerprints are change-detection tokens, not a security boundary,
so a 128-bit MD5 digest is sufficient.
"""

import hashlib
from collections.abc import Sequence

FIELD_SEPARATOR = "|"

# Placeholder for absent fields, kept stable so existing state files stay valid
ABSENT_FIELD = "undefined"


def fingerprint(fields: Sequence[str | None]) -> str:
    """
    Compute the fingerprint of an ordered sequence of fields.

    Parameters
    ----------
    fields : Sequence[str | None]
        Field values; ``None`` marks an absent field.

    Returns
    -------
    str
        Lowercase hex MD5 digest of the joined fields.
    """
    joined = FIELD_SEPARATOR.join(
        ABSENT_FIELD if value is None else value for value in fields
    )
    return hashlib.md5(joined.encode("utf-8"), usedforsecurity=False).hexdigest()
