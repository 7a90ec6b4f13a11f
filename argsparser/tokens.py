"""
Argsparser tokens: stable identities for registered arguments.

A Token is the pair (kind, position) handed back by every registration call.
Callers keep it around and use it for every later lookup, which skips the name
hashing that a lookup by string would require. Positions are dense per kind,
in registration order, starting at 0.

Tokens have no truth value (`bool(token)` raises TypeError); test them with
`token.valid` or pick one with the `firstvalid(...)` combinator.

    >>> token = firstvalid(registry.find("count"), registry.positional(0))
    >>> token.valid
    True
"""
from enum import IntEnum
from typing import NamedTuple


class ArgKind(IntEnum):
    """
    the three argument kinds, plus the NULL "not found" marker.
    """
    NULL        = 0
    POSITIONAL  = 1
    SWITCH      = 2
    OPTION      = 3


class Token(NamedTuple):
    kind: ArgKind
    position: int

    @property
    def valid(self):
        """
        True unless this is the NULL token.
        """
        return self.kind != ArgKind.NULL

    def orelse(self, other, /):
        """
        Return this token when valid, otherwise `other`.
        """
        return firstvalid(self, other)

    def __bool__(self):
        raise TypeError("the truth value of a token is ambiguous, use token.valid")

    def __repr__(self):
        return "Token(%s, %d)" % (ArgKind(self.kind).name.lower(), self.position)


NULL_TOKEN = Token(ArgKind.NULL, 0)


def firstvalid(*tokens):
    """
    Return the first valid token among `tokens`, or NULL_TOKEN when none is.
    """
    for token in tokens:
        if not isinstance(token, Token):
            raise TypeError("firstvalid() arguments must be tokens")
        if token.valid:
            return token
    return NULL_TOKEN


__all__ = (
    "ArgKind",
    "Token",
    "NULL_TOKEN",
    "firstvalid",
)
