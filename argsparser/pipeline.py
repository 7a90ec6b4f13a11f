"""
Argsparser validation/conversion pipeline and per-parse records.

Records
- Specs are immutable; whatever a parse pass learns about an argument lives in
  a Record owned by the parser and keyed by the argument's token. A new parse
  pass starts from fresh records.

evaluate()
- The one place where caller functions run for a value-bearing argument:
  1. validator(raw): falsy result or raised Exception → failed validation.
  2. callback(): always, whatever the validation outcome.
  3. converter(raw), only after a passed validation: raised Exception →
     failed conversion. Without a converter the raw string is the value.
- Failures are returned as faults for the parser to route. With critical=True
  they are raised instead, before anything else runs.
"""
from enum import Enum
from typing import NamedTuple

from .faults import ValidationFailedError, ConversionFailedError
from .utils import *


class ValidationState(Enum):
    UNVALIDATED = "unvalidated"
    PASSED = "passed"
    FAILED = "failed"


class Validation(NamedTuple):
    state: ValidationState
    reason: str | None = None

    @property
    def validated(self):
        return self.state is ValidationState.PASSED


UNVALIDATED = Validation(ValidationState.UNVALIDATED)
PASSED = Validation(ValidationState.PASSED)


class Record:
    """
    Mutable state of one argument during one parse pass.

    - raw: last raw string taken from the input (Unset for switches and until supplied).
    - value: accepted value (Unset until validation and conversion both succeed).
    - validation: Validation(state, reason).
    - supplied: the input named this argument, whether or not its value was accepted.
    """
    __slots__ = ("raw", "value", "validation", "supplied")

    def __init__(self):
        self.raw = Unset
        self.value = Unset
        self.validation = UNVALIDATED
        self.supplied = False

    def __repr__(self):
        return "record(raw=%r, value=%r, validation=%s, supplied=%r)" % (
            self.raw, self.value, self.validation.state.value, self.supplied
        )


def present(record, spec, /):
    """
    Record a presence-only argument (Switch, or Option with requires=False).
    """
    record.supplied = True
    record.validation = PASSED
    record.value = True
    if spec.callback is not Unset:
        spec.callback()


def _reason(exception):
    return str(exception) or type(exception).__name__


def evaluate(token, spec, raw, record, /, *, critical=False, **context):
    """
    Run the validator, callback and converter of `spec` against `raw`.

    Parameters
    - token: the argument's token, attached to any fault.
    - spec: Positional or value-bearing Option.
    - raw: the raw input string.
    - record: the argument's Record, updated in place.
    - critical: raise the first fault instead of returning it.
    - context: extra fault options (index, input, colorful, fancy, ...).

    Returns
    - Unset when the value was accepted, otherwise the fault to route.
    """
    record.supplied = True
    record.raw = raw
    record.value = Unset
    fault = Unset

    if spec.validator is Unset:
        record.validation = PASSED
    else:
        cause = None
        try:
            accepted = bool(spec.validator(raw))
            reason = "value %r was rejected" % raw
        except Exception as exception:
            cause = exception
            accepted = False
            reason = _reason(exception)

        if accepted:
            record.validation = PASSED
        else:
            record.validation = Validation(ValidationState.FAILED, reason)
            fault = ValidationFailedError(
                "invalid value %r for %s %r: %s" % (raw, type(spec).__typename__, spec.name, reason),
                hint="check the accepted values for %r" % spec.name,
                token=token,
                reason=reason,
                raw=raw,
                **context
            )
            fault.__cause__ = cause
            if critical:
                raise fault from cause

    if spec.callback is not Unset:
        spec.callback()

    if fault is not Unset:
        return fault

    if spec.converter is Unset:
        record.value = raw
        return Unset

    try:
        record.value = spec.converter(raw)
    except Exception as exception:
        fault = ConversionFailedError(
            "cannot convert %r for %s %r: %s" % (raw, type(spec).__typename__, spec.name, _reason(exception)),
            hint="pass a value of the expected type for %r" % spec.name,
            token=token,
            raw=raw,
            **context
        )
        fault.__cause__ = exception
        if critical:
            raise fault from exception
        return fault
    return Unset


__all__ = (
    "ValidationState",
    "Validation",
    "Record",
    "present",
    "evaluate",
)
