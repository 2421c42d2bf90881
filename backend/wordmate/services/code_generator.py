"""
Redemption code generation and input normalization.

Codes are 12 symbols from a 32-character alphabet without the look-alikes
0/O and 1/I (upper-case L stays, there is no lower case), shown as
XXXX-XXXX-XXXX. Uniqueness relies on the ~60 bits of
entropy; the store's unique index catches the (theoretical) collision.
"""
import re
import secrets

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 12
GROUP_SIZE = 4

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def format_code(raw: str) -> str:
    """Split a 12-character code into hyphenated groups of four, upper-cased."""
    raw = raw.upper()
    return "-".join(raw[i:i + GROUP_SIZE] for i in range(0, len(raw), GROUP_SIZE))


def generate_redemption_code() -> str:
    """
    Generate a code like 7KQM-XH3P-ZC9A using a CSPRNG.
    """
    raw = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return format_code(raw)


def normalize_code_input(raw: str) -> str:
    """
    Turn user input into the key the store is searched with.

    Non-alphanumerics are stripped and the rest upper-cased; if that leaves
    exactly 12 characters and the user typed no hyphen, the canonical hyphens
    are re-inserted. Anything else is searched as typed (upper-cased), so
    "abcd1234efgh" -> "ABCD-1234-EFGH" but "abcd-1234-efgh" -> "ABCD-1234-EFGH"
    only because it was already hyphenated.
    """
    raw = raw.strip()
    cleaned = _NON_ALNUM.sub("", raw).upper()
    if len(cleaned) == CODE_LENGTH and "-" not in raw:
        return format_code(cleaned)
    return raw.upper()
