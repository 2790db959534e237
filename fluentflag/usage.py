"""
fluentflag usage rendering.

Layout (one block per flag)
    "  " + column, padded to COLUMN display cells, + usage + default suffix

- column: "-a, --name" when an alias is set, "    --name" otherwise, followed
  by " <type>" for every kind except bool (presence alone means true).
- when the column is COLUMN cells or wider it stands alone on its line; the
  usage goes on a second line indented by "  " + COLUMN blanks.
- default suffix: ' (default "text")' for non-empty strings, ' (default true)'
  for true bools, ' (default <value>)' for non-zero numbers; nothing otherwise.

Palette keys (override through __styles__ in __main__)
- flag-alias, flag-name, flag-type, flag-usage, flag-default
"""
from collections import defaultdict

from rich.cells import cell_len
from rich.text import Text

from .values import FlagKind, render

COLUMN = 25


_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _escape(char):
    if char in _ESCAPES:
        return _ESCAPES[char]
    elif char.isprintable():
        return char
    elif (code := ord(char)) < 0x80:
        return "\\x%02x" % code
    elif code <= 0xFFFF:
        return "\\u%04x" % code
    return "\\U%08x" % code


def quote(text, /):
    """
    double-quoted text with backslash escapes for quotes, backslashes and
    non-printable characters (\\a, \\x7f, \\u200b); printable unicode is kept.
    """
    return '"%s"' % "".join(map(_escape, text))


def default_suffix(kind, default, /):
    """text appended after the usage when the default is worth showing."""
    match kind:
        case FlagKind.BOOL:
            return " (default true)" if default else ""
        case FlagKind.STRING:
            return " (default %s)" % quote(default) if default else ""
        case _:
            return " (default %s)" % render(default, kind) if default != kind.zero else ""


def styled_usage(flag, /, *, colorful=True):
    """
    render one descriptor as rich Text (a single line, or two when wrapped).

    flag needs name, short (a character or None), kind, descr and default_value.
    """
    styles = defaultdict(str, {
        "flag-alias": "bold #22C55E",  # green short form
        "flag-name": "bold #00E6FF",  # cyan long form
        "flag-type": "#FFD600",  # amber type name
        "flag-usage": "#9CA3AF",  # muted gray description
        "flag-default": "italic #737373",  # dim default
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        return Text(fragment, styles[style] if colorful else "")

    column = Text()
    if flag.short:
        column.append_text(text("-" + flag.short, "flag-alias"))
        column.append(", ")
    else:
        column.append("    ")
    column.append_text(text("--" + flag.name, "flag-name"))
    if flag.kind is not FlagKind.BOOL:
        column.append(" ")
        column.append_text(text(flag.kind.value, "flag-type"))

    line = Text("  ")
    line.append_text(column)
    if (width := cell_len(column.plain)) >= COLUMN:
        line.append("\n  " + " " * COLUMN)
    else:
        line.append(" " * (COLUMN - width))
    line.append_text(text(flag.descr, "flag-usage"))
    line.append_text(text(default_suffix(flag.kind, flag.default_value), "flag-default"))
    return line


def usage_line(flag, /):
    """plain-text usage block for one descriptor."""
    return styled_usage(flag, colorful=False).plain


def usage_text(flags, /):
    """usage blocks for every descriptor, in order, each ending with a newline."""
    return "".join(usage_line(flag) + "\n" for flag in flags)


__all__ = (
    "COLUMN",
    "quote",
    "default_suffix",
    "styled_usage",
    "usage_line",
    "usage_text",
)
