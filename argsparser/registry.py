"""
Argsparser registry: ownership of every registered argument spec.

Layout
- one list per ArgKind; a token's position is its index in that list, so
  lookup(token) is plain indexing.
- one flat mapping name → token for switches and options (names and aliases
  share it, so "--x" can never be ambiguous between a switch and an option).
- positional names are kept apart: they only need to be unique among
  positionals and are never matched against input.

Lifecycle
- register() is only accepted until close() is called; the parser closes the
  registry when its first parse starts. Nothing is ever removed or re-keyed.
"""
import logging

from .arguments import Positional, Switch, Option
from .faults import DuplicateRegistrationError, RegistrationClosedError
from .tokens import ArgKind, Token, NULL_TOKEN
from .utils import *

logger = logging.getLogger(__name__)


class Registry:
    """
    Token- and name-keyed store of Positional, Switch and Option specs.
    """

    def __init__(self):
        self._specs = {
            ArgKind.POSITIONAL: [],
            ArgKind.SWITCH: [],
            ArgKind.OPTION: [],
        }
        self._names = {}
        self._positionals = {}
        self._closed = False

    closed = mirror("closed")

    def close(self):
        """
        End the registration phase; later register() calls are rejected.
        """
        if not self._closed:
            logger.debug("registry closed with %d argument(s)", len(self))
        self._closed = True

    def register(self, spec, /):
        """
        Store `spec` and return its new token.

        Raises
        - TypeError: spec is not a Positional, Switch or Option.
        - RegistrationClosedError: parsing has already started.
        - DuplicateRegistrationError: a name or alias is already taken. The
          registry is left untouched, none of the spec's names are inserted.
        """
        match spec:
            case Positional():
                kind = ArgKind.POSITIONAL
            case Switch():
                kind = ArgKind.SWITCH
            case Option():
                kind = ArgKind.OPTION
            case _:
                raise TypeError("register() argument must be a positional, a switch or an option")

        if self._closed:
            raise RegistrationClosedError(
                "cannot register %s %r once parsing has started" % (type(spec).__typename__, spec.name),
                hint="register every argument before the first parse",
                name=spec.name,
            )

        if kind is ArgKind.POSITIONAL:
            if spec.name in self._positionals:
                raise DuplicateRegistrationError(
                    "positional %r is already registered" % spec.name,
                    hint="give each positional a distinct name",
                    name=spec.name,
                    token=self._positionals[spec.name],
                )
            names = {}
            self._positionals[spec.name] = token = Token(kind, len(self._specs[kind]))
        else:
            # Check every name before inserting any of them.
            for name in spec.names:
                if name in self._names:
                    raise DuplicateRegistrationError(
                        "name %r is already registered" % name,
                        hint="switches and options share one namespace; pick another name or alias",
                        name=name,
                        token=self._names[name],
                    )
            names = dict.fromkeys(spec.names, token := Token(kind, len(self._specs[kind])))

        self._names.update(names)
        self._specs[kind].append(spec)
        logger.debug("registered %s %r as %r", type(spec).__typename__, spec.name, token)
        return token

    def lookup(self, token, /):
        """
        Return the spec registered under `token` (direct indexing).

        Raises
        - TypeError: token is not a Token.
        - LookupError: NULL_TOKEN, or a token this registry never issued.
        """
        if not isinstance(token, Token):
            raise TypeError("lookup() argument must be a token")
        try:
            specs = self._specs[token.kind]
        except KeyError:
            raise LookupError("null token has no argument") from None
        if not 0 <= token.position < len(specs):
            raise LookupError("no argument registered for %r" % (token,))
        return specs[token.position]

    def find(self, name, /):
        """
        Return the token of the switch/option named (or aliased) `name`, or NULL_TOKEN.
        """
        return self._names.get(name, NULL_TOKEN)

    def positional(self, order, /):
        """
        Return the token of the positional at `order` (0-based), or NULL_TOKEN.
        """
        if 0 <= order < len(self._specs[ArgKind.POSITIONAL]):
            return Token(ArgKind.POSITIONAL, order)
        return NULL_TOKEN

    def tokens(self, kind=Unset, /):
        """
        Iterate over issued tokens, optionally restricted to one kind.
        """
        kinds = self._specs.keys() if kind is Unset else (ArgKind(kind),)
        for kind in kinds:
            for position in range(len(self._specs[kind])):
                yield Token(kind, position)

    def __iter__(self):
        """
        Yield (token, spec) pairs: positionals, then switches, then options.
        """
        for kind, specs in self._specs.items():
            for position, spec in enumerate(specs):
                yield Token(kind, position), spec

    def __len__(self):
        return sum(map(len, self._specs.values()))

    def __contains__(self, token, /):
        try:
            self.lookup(token)
        except (TypeError, LookupError):
            return False
        return True

    def __repr__(self):
        return "registry(positionals=%d, switches=%d, options=%d, closed=%r)" % (
            len(self._specs[ArgKind.POSITIONAL]),
            len(self._specs[ArgKind.SWITCH]),
            len(self._specs[ArgKind.OPTION]),
            self._closed,
        )


__all__ = (
    "Registry",
)
