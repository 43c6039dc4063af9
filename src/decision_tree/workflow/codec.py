"""Position fingerprint codec.

A workflow's position is stored as a single string:

    "entry_a/entry_b:call_x/call_y"

The left side lists every reached entry point in first-reach order. The right
side lists every recorded non-idempotent call. Either side may be empty. This
string is the only durable state, so its format must stay stable.
"""

from __future__ import annotations

from collections.abc import Iterable

from .errors import InvalidIdentifierError, MalformedFingerprintError

ENTRY_SEPARATOR = "/"
SIDE_SEPARATOR = ":"


def validate_identifier(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidIdentifierError(f"Identifier must be a non-empty string, got {name!r}")
    if ENTRY_SEPARATOR in name or SIDE_SEPARATOR in name:
        raise InvalidIdentifierError(
            f"Identifier {name!r} must not contain '{ENTRY_SEPARATOR}' or '{SIDE_SEPARATOR}'"
        )
    return name


def encode(entry_points: Iterable[str], calls: Iterable[str]) -> str:
    # dict.fromkeys keeps first-seen order and drops repeats.
    entries = list(dict.fromkeys(validate_identifier(e) for e in entry_points))
    # Calls are a set; sorting keeps the fingerprint of a given state stable.
    recorded = sorted({validate_identifier(c) for c in calls})
    return ENTRY_SEPARATOR.join(entries) + SIDE_SEPARATOR + ENTRY_SEPARATOR.join(recorded)


def _split_side(side: str) -> list[str]:
    return [part for part in side.split(ENTRY_SEPARATOR) if part]


def decode(fingerprint: str | None) -> tuple[tuple[str, ...], frozenset[str]]:
    """Decode a fingerprint into (entry points, calls).

    A missing or empty fingerprint decodes to an empty position. A fingerprint
    without a colon is read as entry points only.
    """

    if not fingerprint:
        return (), frozenset()

    if fingerprint.count(SIDE_SEPARATOR) > 1:
        raise MalformedFingerprintError(f"Malformed fingerprint: {fingerprint!r}")

    entries_side, _, calls_side = fingerprint.partition(SIDE_SEPARATOR)
    entries = tuple(dict.fromkeys(_split_side(entries_side)))
    calls = frozenset(_split_side(calls_side))
    return entries, calls
