"""
fluentflag values: the closed kind set, the codec and the storage adapters.

Overview
- FlagKind
  • The closed set of supported flag types (bool, string, int, int64,
    float64, uint, uint64). Every codec operation dispatches on it.
- parse(raw, kind) / render(value, kind)
  • Decode command-line text into a typed value and back into canonical text.
    parse() raises MalformedValueError for bad input, UnsupportedTypeError
    for anything outside FlagKind.
- coerce(value, kind)
  • Validate a Python value (a configured default) against a kind.
- Ref
  • A mutable cell standing in for a caller-owned variable.
- Accumulator
  • A settable value that appends every occurrence of a repeated flag to a list.

Grammar (per kind)
- bool:     1 t T TRUE true True / 0 f F FALSE false False
- integers: base-10 ASCII digits, an optional sign for signed kinds only,
            checked against the width of the kind
- float64:  decimal or exponent notation, hexadecimal with a 'p' exponent,
            inf / infinity / nan (case-insensitive)

Rendering
- float64 uses the shortest round-trip digits, in exponent form (1e+06,
  2.5e-07) when the decimal exponent is below -4 or at least 6.

Quick examples
    >>> parse("42", FlagKind.INT)
    42
    >>> render(parse("1000000", FlagKind.FLOAT64), FlagKind.FLOAT64)
    '1e+06'
    >>> values = []
    >>> accumulator = Accumulator(FlagKind.INT, values)
    >>> accumulator.set("1"); accumulator.set("2")
    >>> str(accumulator)
    '[1 2]'
"""
import math
import re
import sys
from decimal import Decimal
from enum import Enum

from .faults import FaultCode, MalformedValueError, UnsupportedTypeError


class FlagKind(Enum):
    """
    closed set of flag types; the member value is the display name used in usage text.
    """
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    INT64 = "int64"
    FLOAT64 = "float64"
    UINT = "uint"
    UINT64 = "uint64"

    @property
    def zero(self):
        return _ZEROS[self]

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


_ZEROS = {
    FlagKind.BOOL: False,
    FlagKind.STRING: "",
    FlagKind.INT: 0,
    FlagKind.INT64: 0,
    FlagKind.FLOAT64: 0.0,
    FlagKind.UINT: 0,
    FlagKind.UINT64: 0,
}

_BOUNDS = {
    FlagKind.INT: (-2 ** 31, 2 ** 31 - 1),
    FlagKind.INT64: (-2 ** 63, 2 ** 63 - 1),
    # machine word, the same width the interpreter uses for sizes
    FlagKind.UINT: (0, 2 * sys.maxsize + 1),
    FlagKind.UINT64: (0, 2 ** 64 - 1),
}

_BOOLEANS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEXADECIMAL = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")
_SPECIAL = re.compile(r"[+-]?(?:inf|infinity)|nan", re.IGNORECASE)


def _malformed(raw, kind, reason):
    return MalformedValueError(
        "invalid %s value %r: %s" % (kind.value, raw, reason),
        title="malformed value",
        code=FaultCode.MALFORMED_VALUE,
        hint="pass a valid %s literal" % kind.value,
        raw=raw,
        kind=kind,
        reason=reason,
    )


def _parse_float(raw):
    if _DECIMAL.fullmatch(raw) or _SPECIAL.fullmatch(raw):
        value = float(raw)
        if math.isinf(value) and not _SPECIAL.fullmatch(raw):
            raise _malformed(raw, FlagKind.FLOAT64, "value out of range")
        return value
    if _HEXADECIMAL.fullmatch(raw):
        try:
            return float.fromhex(raw)
        except OverflowError:
            raise _malformed(raw, FlagKind.FLOAT64, "value out of range") from None
    raise _malformed(raw, FlagKind.FLOAT64, "invalid syntax")


def parse(raw, kind, /):
    """
    decode command-line text into a value of the given kind.

    raises
    - MalformedValueError: the text is not a literal of the kind, or it
      overflows the kind's width.
    - UnsupportedTypeError: kind is not a FlagKind member.
    """
    if not isinstance(raw, str):
        raise TypeError("parse() argument must be a string")

    match kind:
        case FlagKind.BOOL:
            try:
                return _BOOLEANS[raw]
            except KeyError:
                raise _malformed(raw, kind, "invalid syntax") from None
        case FlagKind.STRING:
            return raw
        case FlagKind.INT | FlagKind.INT64 | FlagKind.UINT | FlagKind.UINT64:
            pattern = _UNSIGNED if kind in (FlagKind.UINT, FlagKind.UINT64) else _SIGNED
            if not pattern.fullmatch(raw):
                raise _malformed(raw, kind, "invalid syntax")
            low, high = _BOUNDS[kind]
            try:
                value = int(raw)
            except ValueError:  # more digits than the interpreter converts
                raise _malformed(raw, kind, "value out of range") from None
            if not low <= value <= high:
                raise _malformed(raw, kind, "value out of range")
            return value
        case FlagKind.FLOAT64:
            return _parse_float(raw)
        case _:
            raise UnsupportedTypeError(
                "unsupported flag type %r" % (kind,),
                title="unsupported flag type",
                code=FaultCode.UNSUPPORTED_TYPE,
                hint="use one of: %s" % ", ".join(member.value for member in FlagKind),
                kind=kind,
            )


def _render_float(value):
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    # repr() is the shortest text that round-trips; re-layout its digits
    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(map(str, digits))
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped
    scientific = len(digits) + exponent - 1

    if scientific < -4 or scientific >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        text = "%se%s%02d" % (mantissa, "-" if scientific < 0 else "+", abs(scientific))
    elif exponent >= 0:
        text = digits + "0" * exponent
    elif -exponent >= len(digits):
        text = "0." + "0" * (-exponent - len(digits)) + digits
    else:
        text = digits[:exponent] + "." + digits[exponent:]

    return ("-" if sign else "") + text


def render(value, kind, /):
    """
    canonical text of a value: parse(render(v, kind), kind) == v for every valid v.
    """
    match kind:
        case FlagKind.BOOL:
            return "true" if value else "false"
        case FlagKind.STRING:
            return value
        case FlagKind.INT | FlagKind.INT64 | FlagKind.UINT | FlagKind.UINT64:
            return str(int(value))
        case FlagKind.FLOAT64:
            return _render_float(float(value))
        case _:
            raise UnsupportedTypeError(
                "unsupported flag type %r" % (kind,),
                title="unsupported flag type",
                code=FaultCode.UNSUPPORTED_TYPE,
                kind=kind,
            )


def coerce(value, kind, /):
    """
    validate a Python value against a kind and return it in the kind's representation.

    - bool accepts only bool; string only str.
    - integer kinds accept int (not bool) within the kind's width.
    - float64 accepts int or float (not bool) and returns a float.
    """
    match kind:
        case FlagKind.BOOL:
            if not isinstance(value, bool):
                raise TypeError("bool flag default must be a bool, not %s" % type(value).__name__)
            return value
        case FlagKind.STRING:
            if not isinstance(value, str):
                raise TypeError("string flag default must be a str, not %s" % type(value).__name__)
            return value
        case FlagKind.INT | FlagKind.INT64 | FlagKind.UINT | FlagKind.UINT64:
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError("%s flag default must be an int, not %s" % (kind.value, type(value).__name__))
            low, high = _BOUNDS[kind]
            if not low <= value <= high:
                raise ValueError("%s flag default %d out of range [%d, %d]" % (kind.value, value, low, high))
            return value
        case FlagKind.FLOAT64:
            if not isinstance(value, int | float) or isinstance(value, bool):
                raise TypeError("float64 flag default must be a float, not %s" % type(value).__name__)
            return float(value)
        case _:
            raise UnsupportedTypeError(
                "unsupported flag type %r" % (kind,),
                title="unsupported flag type",
                code=FaultCode.UNSUPPORTED_TYPE,
                kind=kind,
            )


class Ref:
    """
    mutable cell holding one flag value.

    a flag bound to a Ref writes into .value whenever the flag set decodes an
    occurrence; build_var() hands one back pre-filled with the default.
    """
    __slots__ = ("value",)

    def __init__(self, value=None):
        self.value = value

    def __repr__(self):
        return f"Ref({self.value!r})"

    def __rich_repr__(self):
        yield self.value


class Accumulator:
    """
    settable value that appends each decoded occurrence to a list.

    - set(raw): decode via the codec and append; on failure the list is left
      unchanged and MalformedValueError propagates.
    - str(): "[1 2]" style rendering, "[]" when empty.
    - never a presence toggle, whatever the kind.
    """
    is_bool_flag = False

    def __init__(self, kind, target=None):
        self.kind = kind
        self.target = target if target is not None else []

    def set(self, raw):
        self.target.append(parse(raw, self.kind))

    def render(self):
        return "[%s]" % " ".join(render(value, self.kind) for value in self.target)

    __str__ = render

    def __repr__(self):
        return f"Accumulator({self.kind!r}, {self.target!r})"


__all__ = (
    "FlagKind",
    "parse",
    "render",
    "coerce",
    "Ref",
    "Accumulator",
)
