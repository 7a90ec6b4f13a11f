"""
Argsparser faults (registration, parsing and retrieval errors) and rendering.

Scope
- FailureKind: canonical, stable numeric identifiers for every failure the
  package can report. Codes are grouped by domain to keep logs/searches
  predictable.
- ArgsParserException and its families:
  • RegistrationError: always fatal, raised at registration time.
  • ParseFault: per-argument parse failures; routed to the argument's error
    handler, collected in the ParseResult, or raised when critical.
  • retrieval errors raised by Parser.getvalue().
- ParseExit: exception group bundling every collected ParseFault.
- report(): print any of the above (or a ParseResult) through rich.

UX goals
- Position-first messages: parse faults name the ordinal position of the
  offending input (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .tokens import NULL_TOKEN
from .utils import Unset

console = Console(stderr=True)


class FailureKind(IntEnum):
    """
    canonical failure codes (stable identifiers).

    grouping (by high-level domain)
    - registration (101xx)
      • DUPLICATE_REGISTRATION, REGISTRATION_CLOSED
    - parsing (111xx)
      • input shape: UNRECOGNIZED_ARGUMENT, MISSING_VALUE, DUPLICATED_ARGUMENT
      • per-argument contracts: VALIDATION_FAILED, CONVERSION_FAILED
      • end of pass: MISSING_REQUIRED
    - retrieval (131xx)
      • NOT_SUPPLIED, TYPE_MISMATCH

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- registration errors (101xx) ---
    DUPLICATE_REGISTRATION      = 10101
    REGISTRATION_CLOSED         = 10102

    # --- input shape errors (111xx) ---
    UNRECOGNIZED_ARGUMENT       = 11111
    MISSING_VALUE               = 11112
    DUPLICATED_ARGUMENT         = 11113

    # --- argument contract errors (111xx) ---
    VALIDATION_FAILED           = 11121
    CONVERSION_FAILED           = 11122

    # --- end of pass errors (111xx) ---
    MISSING_REQUIRED            = 11131

    # --- retrieval errors (131xx) ---
    NOT_SUPPLIED                = 13101
    TYPE_MISMATCH               = 13102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _prog(options):
    main = __import__("__main__")
    return getattr(main, "__prog__", options.get("prog") or os.path.basename(sys.argv[0]) or "argsparser")


def _text(fragment, style, colorful):
    if not fragment:
        return Text("")
    if isinstance(fragment, Text):
        return fragment if colorful else Text(fragment.plain)
    return Text(str(fragment), style if colorful else "")


class ArgsParserException(Exception):
    """
    base class of every error raised or collected by argsparser.

    carries a lowercase message plus read-only options (title, hint, and any
    context the reporter may want: token, kind, index, input, ...).
    """
    __kind__ = Unset
    __title__ = "argument error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def kind(self):
        return self.__kind__

    @property
    def title(self):
        return self.options.get("title", self.__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        header = Text.assemble(
            "[ ",
            _text(_prog(self.options), styles["prog-name"], colorful),
            " — ",
            _text(self.kind.normalize() if self.kind else "-", styles["code"], colorful),
            " | ",
            _text(self.title.title(), styles["error-title"], colorful),
            " ]"
        )
        message = _text(self.message, styles["error-message"], colorful)
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(
                _text(" → ", styles["hint-arrow"], colorful),
                _text(self.hint, styles["hint"], colorful)
            ))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)


class RegistrationError(ArgsParserException):
    __title__ = "bad registration"


class DuplicateRegistrationError(RegistrationError):
    __kind__ = FailureKind.DUPLICATE_REGISTRATION
    __title__ = "duplicate registration"


class RegistrationClosedError(RegistrationError):
    __kind__ = FailureKind.REGISTRATION_CLOSED
    __title__ = "registration closed"


class ParseFault(ArgsParserException):
    """
    a failure found while parsing, tied to the token of the offending argument
    (NULL_TOKEN when the input matched no registration).
    """
    __title__ = "parse failure"

    @property
    def token(self):
        return self.options.get("token", NULL_TOKEN)

    @property
    def index(self):
        return self.options.get("index")


class UnrecognizedArgumentError(ParseFault):
    __kind__ = FailureKind.UNRECOGNIZED_ARGUMENT
    __title__ = "unrecognized argument"


class MissingValueError(ParseFault):
    __kind__ = FailureKind.MISSING_VALUE
    __title__ = "missing value"


class DuplicatedArgumentError(ParseFault):
    __kind__ = FailureKind.DUPLICATED_ARGUMENT
    __title__ = "duplicated argument"


class ValidationFailedError(ParseFault):
    __kind__ = FailureKind.VALIDATION_FAILED
    __title__ = "invalid value"

    @property
    def reason(self):
        return self.options.get("reason")


class ConversionFailedError(ParseFault):
    __kind__ = FailureKind.CONVERSION_FAILED
    __title__ = "unconvertible value"


class MissingRequiredError(ParseFault):
    __kind__ = FailureKind.MISSING_REQUIRED
    __title__ = "missing required argument"


class NotSuppliedError(ArgsParserException, LookupError):
    __kind__ = FailureKind.NOT_SUPPLIED
    __title__ = "value not supplied"


class TypeMismatchError(ArgsParserException, TypeError):
    __kind__ = FailureKind.TYPE_MISMATCH
    __title__ = "type mismatch"


class ParseExit(ExceptionGroup):
    """
    every fault collected by one parse pass, raised together.
    """

    def __new__(cls, exceptions, /, **options):
        return super().__new__(cls, "bad parse", tuple(exceptions))

    def __init__(self, exceptions, /, **options):
        super().__init__("bad parse", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = _styles({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Parse)
        })

        header = Text.assemble(
            "[ ",
            _text(_prog(self.options), styles["prog-name"], colorful),
            " — ",
            _text(self.message.title(), styles["title"], colorful),
            " ]"
        )

        if fancy:
            return Panel(Group(*self.exceptions), title=header, title_align="left")
        return Group(header, *self.exceptions)


def report(fault, /, *, file=Unset):
    """
    print a fault, a ParseExit or a ParseResult (anything with __rich__) to stderr.

    file
    - optional text stream; when given, a dedicated rich console writes there
      instead of the shared stderr console (handy in tests).
    """
    if not hasattr(fault, "__rich__") or not callable(fault.__rich__):
        raise TypeError("report() argument must be renderable")
    if file is Unset:
        return console.print(fault)
    Console(file=file, force_terminal=False, width=console.width).print(fault)


__all__ = (
    "FailureKind",
    "ArgsParserException",
    "RegistrationError",
    "DuplicateRegistrationError",
    "RegistrationClosedError",
    "ParseFault",
    "UnrecognizedArgumentError",
    "MissingValueError",
    "DuplicatedArgumentError",
    "ValidationFailedError",
    "ConversionFailedError",
    "MissingRequiredError",
    "NotSuppliedError",
    "TypeMismatchError",
    "ParseExit",
    "report",
)
