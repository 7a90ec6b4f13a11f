r"""
Argsparser argument specifications.

Overview
- Specs (immutable registration-time descriptors)
  • Positional[_T]: value-bearing argument matched purely by consumption order.
  • Switch: named, presence-only argument (e.g., --verbose/-v).
  • Option[_T]: named argument that consumes the following input token as its
    value (or, with requires=False, a bare flag equivalent to a Switch).

  The three classes share no base: the parser dispatches over them with
  `match`, since the fields that mean something differ per kind.

- Caller-supplied functions
  • validator(raw: str) -> bool   may raise to fail with a descriptive reason.
  • converter(raw: str) -> _T     raising means the value could not be converted.
  • callback() -> None            runs once the value is taken, valid or not.
  • handler(fault) -> None        receives this argument's parse faults instead
                                  of the aggregate failure list.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ via read-only properties.

Metadata (sanitized on construction)
- Shared
  • name: str matching r"[^\W\d_](-?[^\W_]+)*" (given without any prefix).
  • descr: Unset | str | Text (short help), non-empty when provided.
  • callback/handler: Unset | Callable.
  • critical: bool, failures of this argument abort the parse.
- Value-bearing (Positional/Option)
  • validator/converter: Unset | Callable.
  • default: any value, Unset when there is none.
  • required: bool (positionals default to True, options to False).
- Named (Switch/Option)
  • alias: Unset | single letter or digit.

Quick example:
    >>> from argsparser.arguments import Positional, Switch, Option
    >>> source = Positional("source", descr="file to read")
    >>> verbose = Switch("verbose", "v")
    >>> count = Option("count", "c", converter=int, default=1)
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__. Names also listed in __verbatim__
      are exposed as-is (no container copies).

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            } | {
                # Defaults are handed back as registered, never copied.
                name: property(operator.attrgetter("_" + name)) for name in namespace.get("__verbatim__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - switch(name='verbose', alias='v', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by every spec.

    - name: required, trimmed, must look like a shell-style long name without
      its prefix ("count", "dry-run", unicode letters allowed).
    - descr: Unset (becomes None) or a non-empty string/Text.
    - callback/handler: Unset or callables.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid shell-style name without prefix (unicodes are allowed)")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    for field in ("callback", "handler"):
        if metadata[field] is not Unset and not callable(metadata[field]):
            raise TypeError(f"{cls.__typename__} '{field}' must be callable")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the alias of named (Switch/Option) specs.

    An alias is a single letter or digit, matched later as "-x".
    """
    if not isinstance(alias := metadata["alias"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string")
    elif isinstance(alias, str) and not re.fullmatch(r"[^\W_]", alias := alias.strip()):
        raise ValueError(f"{cls.__typename__} 'alias' must be a single letter or digit")
    metadata["alias"] = alias


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate the fields of value-bearing (Positional/Option) specs.

    - validator/converter: Unset or callables; their signatures are trusted.
    - default: not validated; any value (including None) is a legitimate default.
    """
    for field in ("validator", "converter"):
        if metadata[field] is not Unset and not callable(metadata[field]):
            raise TypeError(f"{cls.__typename__} '{field}' must be callable")


class Positional[_T](metaclass=ArgumentType):
    """
    Positional, value-bearing argument specification.

    Positionals are never prefixed on the command line: each unprefixed input
    token is given to the next positional in registration order. Their name
    only identifies them in messages.

    A positional without a default is required unless registered with
    required=False.
    """

    __introspectable__ = (
        "name",
        "descr",
        "validator",
        "converter",
        "callback",
        "handler",
        "default",
        "required",
        "critical",
    )
    __verbatim__ = ("default",)
    __displayable__ = (
        "name",
        "descr",
        "default",
        "required",
        "critical",
    )

    def __new__(
            cls,
            name,
            /,
            descr=Unset,
            validator=Unset,
            converter=Unset,
            callback=Unset,
            default=Unset,
            *,
            required=True,
            handler=Unset,
            critical=False
    ):
        metadata = {
            "name": name,
            "descr": descr,
            "validator": validator,
            "converter": converter,
            "callback": callback,
            "handler": handler,
            "default": default,
            "required": bool(required),
            "critical": bool(critical),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def missing(self):
        """
        Whether this positional must be reported when absent from the input.
        """
        return self.required and self.default is Unset


class Switch(metaclass=ArgumentType):
    """
    Named, presence-only argument specification.

    A switch carries no payload: when present its value is True, otherwise
    False. It accepts no validator or converter; its callback is the usual way
    to act on it (e.g., "--help").
    """

    __introspectable__ = (
        "name",
        "alias",
        "descr",
        "callback",
        "handler",
        "default",
        "critical",
    )
    __displayable__ = (
        "name",
        "alias",
        "descr",
        "critical",
    )

    def __new__(
            cls,
            name,
            /,
            alias=Unset,
            descr=Unset,
            callback=Unset,
            *,
            handler=Unset,
            critical=False
    ):
        metadata = {
            "name": name,
            "alias": alias,
            "descr": descr,
            "callback": callback,
            "handler": handler,
            "default": False,
            "critical": bool(critical),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        """
        The name and (when set) the alias, as registered in the flat namespace.
        """
        return (self.name,) if self.alias is Unset else (self.name, self.alias)

    @property
    def missing(self):
        return False


class Option[_T](metaclass=ArgumentType):
    """
    Named argument specification, usually value-bearing.

    Highlights
    - requires=True: the next input token is consumed verbatim as the raw
      value ("--count 42"). When nothing follows, the parse reports a missing
      value, unless lenient=True, in which case the empty string is processed.
    - requires=False: a bare flag; behaves exactly like a Switch (value True,
      default False unless another default is given).
    - required=True: absence without a default is reported at the end of the pass.
    """

    __introspectable__ = (
        "name",
        "alias",
        "descr",
        "requires",
        "validator",
        "converter",
        "callback",
        "handler",
        "default",
        "required",
        "lenient",
        "critical",
    )
    __verbatim__ = ("default",)
    __displayable__ = (
        "name",
        "alias",
        "descr",
        "requires",
        "default",
        "required",
        "lenient",
        "critical",
    )

    def __new__(
            cls,
            name,
            /,
            alias=Unset,
            descr=Unset,
            requires=True,
            validator=Unset,
            converter=Unset,
            callback=Unset,
            default=Unset,
            *,
            required=False,
            lenient=False,
            handler=Unset,
            critical=False
    ):
        metadata = {
            "name": name,
            "alias": alias,
            "descr": descr,
            "requires": bool(requires),
            "validator": validator,
            "converter": converter,
            "callback": callback,
            "handler": handler,
            "default": default,
            "required": bool(required),
            "lenient": bool(lenient),
            "critical": bool(critical),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        if not metadata["requires"]:
            # Bare flags take no value, so nothing would ever reach these.
            if metadata["validator"] is not Unset or metadata["converter"] is not Unset:
                raise TypeError(f"{cls.__typename__} without a value cannot have a 'validator' or 'converter'")
            if metadata["lenient"]:
                raise TypeError(f"{cls.__typename__} without a value cannot be 'lenient'")
            if metadata["required"]:
                raise TypeError(f"{cls.__typename__} without a value cannot be 'required'")
            metadata["default"] = coalesce(metadata["default"], False)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        return (self.name,) if self.alias is Unset else (self.name, self.alias)

    @property
    def missing(self):
        return self.required and self.default is Unset


__all__ = (
    # Classes (specifications)
    "Positional",
    "Switch",
    "Option",
)

# Not part of the public API.
del ArgumentType
