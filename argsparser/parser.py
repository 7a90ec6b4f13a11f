"""
Argsparser parser engine: registration, single-pass parsing and retrieval.

What this module provides
- Parser: owns a Registry, parses an argument vector in one pass and keeps a
  Record per registered argument for later retrieval.
- ParseResult: the ordered faults of a pass (plus extras in permissive mode).
- ParserState: the state machine the engine walks through.

Parsing, one input token per step
- "--name": looked up by name; "-x": looked up by alias (prefixes configurable).
  • Switch (or Option with requires=False): present, value True.
  • Option: the next input token is consumed verbatim as its raw value.
- anything else goes to the next unconsumed positional, in registration order.
- once the input is exhausted, required arguments that were neither supplied
  nor defaulted are reported, all of them, not just the first.

Failure routing
- a fault tied to an argument goes to that argument's handler when it has one
  (parsing continues), otherwise to the result's failure list.
- critical (on the argument or on the parser): the first fault is raised out of
  parse() immediately and nothing after it runs.

Quick start
    from argsparser import Parser

    parser = Parser()
    source = parser.positional("source")
    count = parser.option("count", "c", converter=int, default=1)
    verbose = parser.switch("verbose", "v")

    result = parser.parse(["notes.txt", "--count", "3", "-v"])
    result.check()
    parser.getvalue(count, int)  # 3
"""
import builtins
import difflib
import logging
import shlex
import sys
import types
from collections import deque
from collections.abc import Iterable
from enum import Enum

from rich.text import Text

from .arguments import Positional, Switch, Option
from .faults import *
from .pipeline import Record, Validation, ValidationState, evaluate, present
from .registry import Registry
from .tokens import ArgKind
from .utils import *

logger = logging.getLogger(__name__)


class ParserState(Enum):
    EXPECTING = "expecting-argument"
    POSITIONAL = "consuming-positional"
    SWITCH = "consuming-switch"
    OPTION = "consuming-option"
    OPTION_VALUE = "consuming-option-value"
    DONE = "done"
    FAILED = "failed"


class ParseResult:
    """
    Outcome of one parse pass.

    - failures: faults that were neither handled by an error handler nor
      raised, in the order they were found.
    - extras: unmatched unprefixed input (permissive parsers only).
    """

    def __init__(self, failures=(), extras=(), /, **options):
        self._failures = tuple(failures)
        self._extras = tuple(extras)
        self._options = options

    failures = mirror("failures")
    extras = mirror("extras")

    @property
    def ok(self):
        return not self._failures

    def check(self):
        """
        Raise every failure at once as a ParseExit; return self when there is none.
        """
        if self._failures:
            raise ParseExit(self._failures, **self._options)
        return self

    def __rich__(self):
        if self._failures:
            return ParseExit(self._failures, **self._options)
        return Text("no failures", style="green" if self._options.get("colorful", True) else "")

    def __repr__(self):
        return "parse-result(ok=%r, failures=%r, extras=%r)" % (
            self.ok, [fault.kind.name.lower() for fault in self._failures], self._extras
        )


def _tokenize(arguments):
    """
    Normalize the input of parse() into a list of strings.

    - Unset: sys.argv[1:]
    - str: split with shell rules (shlex.split)
    - Iterable[str]: used as-is, strings are not trimmed (empty values are legitimate)
    """
    if arguments is Unset:
        return list(sys.argv[1:])
    if isinstance(arguments, str):
        return shlex.split(arguments)
    if isinstance(arguments, Iterable):
        tokens = list(arguments)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Parser:
    """
    Single-pass command-line parser over a flat registry of positionals,
    switches and options.

    Options
    - prefix: marks long names ("--count"). Defaults to "--".
    - shortprefix: marks single-character aliases ("-c"). Defaults to "-".
    - critical: every fault aborts the parse (as if each argument were critical).
    - permissive: unmatched unprefixed input is collected in ParseResult.extras
      instead of being reported as unrecognized.
    - colorful/fancy: rendering of the faults through rich.
    - prog: program name shown in fault headers (defaults to sys.argv[0]).
    """

    def __init__(
            self,
            *,
            prefix="--",
            shortprefix="-",
            critical=False,
            permissive=False,
            colorful=True,
            fancy=False,
            prog=Unset
    ):
        for name, value in (("prefix", prefix), ("shortprefix", shortprefix)):
            if not isinstance(value, str):
                raise TypeError(f"parser '{name}' must be a string")
            if not value or value.strip() != value:
                raise ValueError(f"parser '{name}' must be a non-empty string without spaces")
        if prefix == shortprefix:
            raise ValueError("parser 'prefix' and 'shortprefix' must differ")
        if shortprefix.startswith(prefix):
            raise ValueError("parser 'shortprefix' cannot start with 'prefix'")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")

        self._prefix = prefix
        self._shortprefix = shortprefix
        self._critical = bool(critical)
        self._permissive = bool(permissive)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._prog = prog
        self._registry = Registry()
        self._records = {}
        self._faults = []
        self._extras = []
        self._index = 0
        self._state = ParserState.EXPECTING
        self._result = Unset

    prefix = mirror("prefix")
    shortprefix = mirror("shortprefix")
    critical = mirror("critical")
    permissive = mirror("permissive")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    state = mirror("state")
    registry = mirror("registry")
    result = mirror("result")

    def register(self, spec, /):
        """
        Register a prebuilt Positional, Switch or Option and return its token.
        """
        return self._registry.register(spec)

    def positional(
            self,
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
        """
        Register a positional argument; it receives the next unprefixed input token.
        """
        return self.register(Positional(
            name, descr, validator, converter, callback, default,
            required=required, handler=handler, critical=critical
        ))

    def switch(self, name, /, alias=Unset, descr=Unset, callback=Unset, *, handler=Unset, critical=False):
        """
        Register a presence-only switch ("--name" or "-alias").
        """
        return self.register(Switch(name, alias, descr, callback, handler=handler, critical=critical))

    def option(
            self,
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
        """
        Register a named option, by default taking the following input token as value.
        """
        return self.register(Option(
            name, alias, descr, requires, validator, converter, callback, default,
            required=required, lenient=lenient, handler=handler, critical=critical
        ))

    def parse(self, arguments=Unset, /):
        """
        Parse `arguments` in a single pass and return a ParseResult.

        arguments
        - Unset: sys.argv[1:].
        - str: split with shell rules.
        - Iterable[str]: used verbatim.

        Raises
        - the first ParseFault when critical (parser-wide or on the argument).
        - whatever a callback raises; callbacks are not guarded.
        """
        tokens = deque(_tokenize(arguments))

        self._registry.close()
        self._records = {token: Record() for token in self._registry.tokens()}
        self._faults = []
        self._extras = []
        self._index = 0
        self._state = ParserState.EXPECTING
        self._result = Unset

        logger.debug("parsing %d input token(s)", len(tokens))
        pending = deque(self._registry.tokens(ArgKind.POSITIONAL))
        try:
            while tokens:
                input = tokens.popleft()
                self._index += 1
                if (named := self._classify(input)) is not Unset:
                    self._parse_named(input, *named, tokens)
                elif pending:
                    self._parse_positional(pending.popleft(), input)
                else:
                    self._parse_extra(input)
                self._state = ParserState.EXPECTING
            self._sweep()
        except BaseException:
            self._state = ParserState.FAILED
            raise

        self._state = ParserState.DONE
        self._result = ParseResult(self._faults, self._extras, **self._context())
        logger.debug("parse done with %d failure(s)", len(self._faults))
        return self._result

    def _context(self):
        return {
            "colorful": self._colorful,
            "fancy": self._fancy,
        } | ({} if self._prog is Unset else {"prog": self._prog})

    def _classify(self, input):
        """
        Split a prefixed token into (name, long); Unset for anything unprefixed.

        A token made only of a prefix ("-", "--") is not a name and goes to the
        positionals like any other value.
        """
        if input.startswith(self._prefix):
            if len(input) > len(self._prefix):
                return input[len(self._prefix):], True
            return Unset
        if input.startswith(self._shortprefix) and len(input) > len(self._shortprefix):
            return input[len(self._shortprefix):], False
        return Unset

    def _spellings(self):
        for token, spec in self._registry:
            if isinstance(spec, Positional):
                continue
            yield self._prefix + spec.name
            if spec.alias is not Unset:
                yield self._shortprefix + spec.alias

    def _parse_named(self, input, name, long, tokens):
        token = self._registry.find(name)
        if token.valid:
            spec = self._registry.lookup(token)
        if not token.valid or (spec.name if long else spec.alias) != name:
            suggestions = difflib.get_close_matches(input, list(self._spellings()), 1)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "check the spelling; names take %r and aliases take %r" % (self._prefix, self._shortprefix)
            return self._route(UnrecognizedArgumentError(
                "unrecognized argument %r at %s position" % (input, ordinal(self._index)),
                hint=hint,
                input=input,
                index=self._index,
                suggestions=suggestions,
                **self._context()
            ))

        record = self._records[token]
        kind = type(spec).__typename__
        logger.debug("%r at position %d is %s %r", input, self._index, kind, spec.name)

        if record.supplied:
            index = self._index
            # Keep the stream aligned: the repeated occurrence still owns its value.
            if isinstance(spec, Option) and spec.requires and tokens:
                tokens.popleft()
                self._index += 1
            return self._route(DuplicatedArgumentError(
                "%s %r at %s position was already provided" % (kind, input, ordinal(index)),
                hint="keep a single %r; each %s can be given only once" % (input, kind),
                token=token,
                input=input,
                index=index,
                **self._context()
            ), spec)

        match spec:
            case Switch():
                self._state = ParserState.SWITCH
                present(record, spec)
            case Option(requires=False):
                self._state = ParserState.OPTION
                present(record, spec)
            case Option():
                self._state = ParserState.OPTION
                index = self._index
                if tokens:
                    self._state = ParserState.OPTION_VALUE
                    raw = tokens.popleft()
                    self._index += 1
                elif spec.lenient:
                    raw = ""
                else:
                    record.supplied = True
                    record.validation = Validation(ValidationState.FAILED, "missing value")
                    return self._route(MissingValueError(
                        "option %r at %s position requires a value" % (input, ordinal(index)),
                        hint="pass the value after a space (for example: %s <value>)" % input,
                        token=token,
                        input=input,
                        index=index,
                        **self._context()
                    ), spec)
                self._evaluate(token, spec, raw, input=input, index=index)
            case _:
                raise RuntimeError("unexpected argument")

    def _parse_positional(self, token, input):
        self._state = ParserState.POSITIONAL
        spec = self._registry.lookup(token)
        logger.debug("%r at position %d is positional %r", input, self._index, spec.name)
        self._evaluate(token, spec, input, input=input, index=self._index)

    def _parse_extra(self, input):
        if self._permissive:
            logger.debug("%r at position %d kept as extra input", input, self._index)
            return self._extras.append(input)
        self._route(UnrecognizedArgumentError(
            "unexpected positional argument %r at %s position" % (input, ordinal(self._index)),
            hint="remove this extra value; every positional is already taken",
            input=input,
            index=self._index,
            **self._context()
        ))

    def _evaluate(self, token, spec, raw, **context):
        fault = evaluate(
            token,
            spec,
            raw,
            self._records[token],
            critical=self._critical or spec.critical,
            **context,
            **self._context()
        )
        if fault is not Unset:
            self._route(fault, spec)

    def _sweep(self):
        """
        Report every required argument that was neither supplied nor defaulted.
        """
        for token, spec in self._registry:
            if spec.missing and not self._records[token].supplied:
                kind = type(spec).__typename__
                if isinstance(spec, Positional):
                    hint = "add a value for %r; positionals are taken in order" % spec.name
                else:
                    hint = "add '%s%s <value>'" % (self._prefix, spec.name)
                self._route(MissingRequiredError(
                    "required %s %r is missing" % (kind, spec.name),
                    hint=hint,
                    token=token,
                    **self._context()
                ), spec)

    def _route(self, fault, spec=Unset, /):
        """
        Send a fault to the critical path, the argument's handler, or the failure list.
        """
        if self._critical or (spec is not Unset and spec.critical):
            logger.debug("critical %s, aborting the parse", fault.kind.name.lower())
            raise fault
        if spec is not Unset and spec.handler is not Unset:
            logger.debug("%s handed to the handler of %r", fault.kind.name.lower(), spec.name)
            spec.handler(fault)
            return
        self._faults.append(fault)

    def _resolve(self, token):
        if isinstance(token, str):
            resolved = self._registry.find(token)
            if not resolved.valid:
                raise LookupError("no switch or option named %r" % token)
            return resolved
        return token

    def find(self, name, /):
        """
        Token of the switch/option with this name or alias, or NULL_TOKEN.
        """
        return self._registry.find(name)

    def lookup(self, token, /):
        """
        The spec registered under `token` (or under a switch/option name).
        """
        return self._registry.lookup(self._resolve(token))

    def getvalue(self, token, type=Unset, /):
        """
        Return the value of an argument after parsing.

        Resolution
        - the accepted (validated and converted) value, if any;
        - otherwise, when the argument was absent from the input, its default
          (switches default to False);
        - otherwise NotSuppliedError. A supplied but rejected value never falls
          back to the default.

        When `type` is given, a value that is not an instance of it raises
        TypeMismatchError. Values are never re-converted.
        """
        if type is not Unset and not isinstance(type, builtins.type | types.UnionType):
            raise TypeError("getvalue() 'type' must be a type")

        spec = self._registry.lookup(token := self._resolve(token))
        record = self._records.get(token)
        if record is not None and record.supplied:
            value = record.value
        else:
            value = spec.default

        if value is Unset:
            raise NotSuppliedError(
                "%s %r has no value" % (spec.__class__.__typename__, spec.name),
                hint=(
                    "its supplied value was rejected; see the parse failures"
                    if record is not None and record.supplied else
                    "supply it on the command line or register it with a default"
                ),
                token=token,
            )
        if type is not Unset and not isinstance(value, type):
            raise TypeMismatchError(
                "%s %r holds %s, not %s" % (
                    spec.__class__.__typename__, spec.name, value.__class__.__name__, getattr(type, "__name__", repr(type))
                ),
                hint="ask for the type produced by its converter",
                token=token,
            )
        return value

    def getvalidation(self, token, /):
        """
        Return the Validation (validated, reason, state) recorded by the last parse.
        """
        self._registry.lookup(token := self._resolve(token))
        try:
            return self._records[token].validation
        except KeyError:
            return Validation(ValidationState.UNVALIDATED)

    def wassupplied(self, token, /):
        """
        Whether the last parse found this argument in the input (valid or not).
        """
        self._registry.lookup(token := self._resolve(token))
        try:
            return self._records[token].supplied
        except KeyError:
            return False

    def __repr__(self):
        return "parser(prefix=%r, shortprefix=%r, critical=%r, permissive=%r, state=%s, registry=%r)" % (
            self._prefix, self._shortprefix, self._critical, self._permissive, self._state.value, self._registry
        )


__all__ = (
    "ParserState",
    "ParseResult",
    "Parser",
)
