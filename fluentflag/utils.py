"""
fluentflag utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the codec, the flag set and the builder.

Overview
- UnsetType / Unset
  • Singleton sentinel for "not configured" (no alias, no default) without
    conflating it with legitimate falsey values such as 0, "" or False.
- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving every other value.
- ordinal(number)
  • Human-friendly position labels ("first", "12th") for parse faults.

Quick examples
    >>> coalesce(Unset, 0)
    0
    >>> coalesce(False, True)
    False
    >>> ordinal(3)
    'third'
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not configured.

    A flag default of 0 or "" is a real default; only Unset means "fall back
    to the zero value of the flag kind". A single instance, Unset, is exposed.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.
    - Usable in unions: str | Unset is str | UnsetType.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or False are preserved as-is; only Unset
    is replaced.
    """
    return object if object is not Unset else default


def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return (
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        )[number - 1] if number > 0 else f"{number}th"
    except IndexError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for "not configured".

Notes
- Singleton: there is only one Unset instance.
- Falsey, but never equal to None, 0, "" or False.
"""


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "ordinal",
)
