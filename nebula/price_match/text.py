"""
Text normalization and loose matching for free-text market labels.

Labels in the price dataset are inconsistent ("Paddy(Dhan)(Common)",
"MAHARASHTRA ", "Pune(Pimpri)"), so every comparison goes through
normalize() first. Matching is a boolean predicate, never a score.
"""

import re

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9 ]")


def normalize(value: str) -> str:
    """
    Canonicalize a label for comparison.

    Examples:
        "Paddy(Dhan)(Common)" -> "paddy"
        "  Dry  Chillies! "   -> "dry chillies"
        "Rice (Paddy)"        -> "rice"

    Parenthesized annotations are dropped, anything outside [a-z0-9 ] is
    stripped, and whitespace runs collapse to a single space. Idempotent.
    """
    if not value:
        return ""
    text = str(value).lower()
    text = _PARENTHETICAL.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    text = _DISALLOWED.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def contains_match(a: str, b: str) -> bool:
    """Equality or substring containment of the normalized labels, in either direction."""
    an = normalize(a)
    bn = normalize(b)
    if not an or not bn:
        return False
    return an == bn or bn in an or an in bn


def loose_match(a: str, b: str) -> bool:
    """
    Decide whether two labels denote the same entity.

    Logic flow (on normalized labels):
    1. Either empty -> no match
    2. Equal -> match
    3. One contains the other -> match
    4. Every token of the smaller token set appears in the larger -> match

    Symmetric: loose_match(a, b) == loose_match(b, a).
    """
    an = normalize(a)
    bn = normalize(b)
    if not an or not bn:
        return False
    if an == bn or bn in an or an in bn:
        return True

    a_tokens = set(an.split(" "))
    b_tokens = set(bn.split(" "))
    small, large = (a_tokens, b_tokens) if len(a_tokens) <= len(b_tokens) else (b_tokens, a_tokens)
    return small <= large
