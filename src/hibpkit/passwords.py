"""Pwned Passwords k-anonymity helpers.

Only the first 5 characters of a password's SHA-1 hash are sent to the
range API. The service answers with every known hash suffix sharing that
prefix, one ``SUFFIX:COUNT`` pair per line, and the suffix is matched
locally so the full hash never leaves this process.

With padding requested, the response also carries decoy suffixes with a
count of 0. A match on a decoy therefore reads as "not found".

API Documentation: https://haveibeenpwned.com/API/v3#PwnedPasswords
"""

import hashlib
import string

from pydantic import BaseModel, Field

from hibpkit.exceptions import DataValidationError

HASH_PREFIX_LENGTH = 5
SHA1_HEX_LENGTH = 40

_HEX_DIGITS = frozenset(string.hexdigits)


class PwnedPassword(BaseModel):
    """One entry of a password range response."""

    hash_suffix: str = Field(description="Hash characters following the 5-char prefix")
    count: int = Field(default=0, ge=0, description="Times seen in breaches (0 for padding)")

    @property
    def is_padding(self) -> bool:
        """Zero-count entries are decoys injected by padded queries."""
        return self.count == 0


def hash_password(password: str) -> str:
    """Return the uppercase SHA-1 hex digest of a password.

    The UTF-8 bytes are hashed exactly as given, with no trimming or
    normalization, to match the hashes held by the service.
    """
    return hashlib.sha1(password.encode("utf-8")).hexdigest().upper()


def split_hash(sha1_hash: str) -> tuple[str, str]:
    """Split a SHA-1 hex digest into its range prefix and local suffix.

    Raises:
        DataValidationError: If the value is not a 40-char hex digest
    """
    if len(sha1_hash) != SHA1_HEX_LENGTH or not _HEX_DIGITS.issuperset(sha1_hash):
        raise DataValidationError(
            f"SHA-1 hash must be exactly {SHA1_HEX_LENGTH} hexadecimal characters",
            length=len(sha1_hash),
        )
    sha1_hash = sha1_hash.upper()
    return sha1_hash[:HASH_PREFIX_LENGTH], sha1_hash[HASH_PREFIX_LENGTH:]


def validate_hash_prefix(hash_prefix: str) -> None:
    """Reject a range prefix that is not exactly 5 characters.

    Content is not checked; the service rejects non-hex prefixes itself.
    """
    if len(hash_prefix) != HASH_PREFIX_LENGTH:
        raise DataValidationError(
            f"Hash prefix must be exactly {HASH_PREFIX_LENGTH} characters",
            hash_prefix=hash_prefix,
        )


def _parse_count(raw: str) -> int:
    try:
        count = int(raw.strip())
    except ValueError:
        return 0
    return max(count, 0)


def parse_range_response(text: str) -> list[PwnedPassword]:
    """Parse a range response body into entries.

    Parsing is lenient: a line without a colon keeps the whole line as the
    suffix, and a count that is not a non-negative integer becomes 0.
    Blank lines are skipped.

    Args:
        text: Response body of ``SUFFIX:COUNT`` lines (CRLF or LF)

    Returns:
        Entries in response order, empty for an empty body
    """
    entries = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        suffix, _, count = line.partition(":")
        entries.append(PwnedPassword(hash_suffix=suffix.strip(), count=_parse_count(count)))
    return entries


def find_occurrences(entries: list[PwnedPassword], hash_suffix: str) -> int:
    """Return the count of the entry matching ``hash_suffix``, or 0."""
    wanted = hash_suffix.upper()
    for entry in entries:
        if entry.hash_suffix.upper() == wanted:
            return entry.count
    return 0
