r"""
fluentflag flag sets: the registry and parser the builder registers into.

Overview
- FlagSet
  • A registry of named settable values plus the parse pass that feeds them.
  • Settable value contract: an object with set(raw) and __str__; an optional
    truthy is_bool_flag attribute turns the flag into a presence toggle.
  • Typed registrants (bool_var, string_var, int_var, int64_var, float64_var,
    uint_var, uint64_var) bind straight into target.attribute and write the
    default at registration time.
- Flag
  • One registry entry: name, usage, value and the default's text.
- command_line
  • The process-wide default flag set (exits on parse faults, like most CLIs).

Parsing rules
- '-name' and '--name' are equivalent; so are '-a' and '--a'.
- '--name=value' or '--name value' for value flags.
- '--name' toggles a bool flag on; '--name=false' sets it explicitly.
  '--name false' does NOT: the second token stops parsing.
- '--' ends the flags; the first non-flag token (or a lone '-') stops parsing.
  Everything after the stop is kept in FlagSet.args.
- '-h'/'--help' request help unless the set defines them.

Error handling (on_error)
- "continue": print the fault and usage on the output, then raise it.
- "raise":    raise the fault silently.
- "exit":     print the fault and usage, then exit with status 2 (0 for help).
Redefining a name always raises FlagRedefinedError at registration.
"""
import difflib
import functools
import os.path
import sys
from collections import deque

from rich.console import Console
from rich.text import Text

from .faults import *
from .usage import quote
from .utils import *
from .values import FlagKind, coerce, parse, render


def _program():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) if sys.argv else "")


class Flag:
    """
    one registered flag: name, usage, settable value and the default as text.
    """
    __slots__ = ("name", "usage", "value", "default")

    def __init__(self, name, usage, value, default):
        self.name = name
        self.usage = usage
        self.value = value
        self.default = default

    def __repr__(self):
        return "flag(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self.name
        yield "usage", self.usage
        yield "value", str(self.value)
        yield "default", self.default


class _TypedValue:
    """
    settable value writing decoded occurrences into target.attribute.
    """
    __slots__ = ("kind", "target", "attribute")

    def __init__(self, kind, target, attribute):
        self.kind = kind
        self.target = target
        self.attribute = attribute

    @property
    def is_bool_flag(self):
        return self.kind is FlagKind.BOOL

    def set(self, raw):
        setattr(self.target, self.attribute, parse(raw, self.kind))

    def get(self):
        return getattr(self.target, self.attribute)

    def __str__(self):
        return render(self.get(), self.kind)


_TYPE_NAMES = {
    FlagKind.BOOL: "",
    FlagKind.STRING: "string",
    FlagKind.INT: "int",
    FlagKind.INT64: "int",
    FlagKind.FLOAT64: "float",
    FlagKind.UINT: "uint",
    FlagKind.UINT64: "uint",
}


def unquote_usage(flag, /):
    """
    return (type name, usage) for a flag as print_defaults shows them.

    a back-quoted word in the usage names the value and loses its quotes:
    "a `directory` to search" gives ("directory", "a directory to search").
    otherwise typed flags use their short kind name ("" for bool) and any
    other settable value is a "value".
    """
    before, tick, rest = flag.usage.partition("`")
    if tick:
        name, tick, after = rest.partition("`")
        if tick:
            return name, before + name + after
    if isinstance(flag.value, _TypedValue):
        return _TYPE_NAMES[flag.value.kind], flag.usage
    elif getattr(flag.value, "is_bool_flag", False):
        return "", flag.usage
    return "value", flag.usage


class FlagSet:
    """
    registry of flags and the parse pass that dispatches argv to them.

    attributes
    - name: program name used in usage and fault headers.
    - on_error: "continue" | "raise" | "exit" (see module docs).
    - usage: zero-argument callable printed on parse faults; replace it freely.
    """

    def __init__(self, name=Unset, /, *, on_error="continue"):
        if on_error not in ("continue", "raise", "exit"):
            raise ValueError("on_error must be one of 'continue', 'raise' or 'exit'")
        self.name = coalesce(name, _program())
        self.on_error = on_error
        self.usage = self._default_usage
        self._formal = {}
        self._actual = {}
        self._args = []
        self._parsed = False
        self._output = Unset

    def __repr__(self):
        return f"FlagSet({self.name!r}, on_error={self.on_error!r})"

    @property
    def output(self):
        return coalesce(self._output, sys.stderr)

    def set_output(self, file, /):
        self._output = file

    @property
    def parsed(self):
        return self._parsed

    @property
    def args(self):
        """tokens left after the flags (everything from the first non-flag on)."""
        return list(self._args)

    def n_flag(self):
        """number of flags set during parsing."""
        return len(self._actual)

    def lookup(self, name, /):
        return self._formal.get(name)

    def var(self, value, name, usage=""):
        """
        register a settable value under name.

        raises
        - ValueError: name is empty, begins with '-' or contains '='.
        - FlagRedefinedError: name is already registered in this set.
        """
        self._claim(name)
        flag = self._formal[name] = Flag(name, usage, value, str(value))
        return flag

    def _claim(self, name):
        if not isinstance(name, str) or not name:
            raise ValueError("flag name must be a non-empty string")
        elif name.startswith("-"):
            raise ValueError("flag %r begins with -" % name)
        elif "=" in name:
            raise ValueError("flag %r contains =" % name)

        if name in self._formal:
            raise FlagRedefinedError(
                "%s flag redefined: %s" % (self.name, name),
                title="flag redefined",
                code=FaultCode.FLAG_REDEFINED,
                hint="each long name and alias can be declared once per flag set",
                prog=self.name,
                flag=name,
            )

    def typed_var(self, kind, target, name, default, usage="", *, attribute="value"):
        """
        register a flag of the given kind writing into target.attribute.

        the default is validated with coerce() and written to the target
        before parsing; name clashes raise before anything is written.
        """
        default = coerce(default, kind)
        self._claim(name)
        setattr(target, attribute, default)
        return self.var(_TypedValue(kind, target, attribute), name, usage)

    bool_var = functools.partialmethod(typed_var, FlagKind.BOOL)
    string_var = functools.partialmethod(typed_var, FlagKind.STRING)
    int_var = functools.partialmethod(typed_var, FlagKind.INT)
    int64_var = functools.partialmethod(typed_var, FlagKind.INT64)
    float64_var = functools.partialmethod(typed_var, FlagKind.FLOAT64)
    uint_var = functools.partialmethod(typed_var, FlagKind.UINT)
    uint64_var = functools.partialmethod(typed_var, FlagKind.UINT64)

    def set(self, name, raw, /):
        """
        set a registered flag programmatically, as if it appeared in argv.
        """
        try:
            flag = self._formal[name]
        except KeyError:
            raise UnknownFlagError(
                "no such flag -%s" % name,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                prog=self.name,
                flag=name,
            ) from None
        flag.value.set(raw)
        self._actual[name] = flag

    def visit_all(self, callback, /):
        """call callback(flag) for every registered flag, sorted by name."""
        for name in sorted(self._formal):
            callback(self._formal[name])

    def visit(self, callback, /):
        """call callback(flag) for every flag set during parsing, sorted by name."""
        for name in sorted(self._actual):
            callback(self._actual[name])

    def print_defaults(self):
        """
        print every registered flag with its type, usage and non-zero default.

        layout per flag
        - "  -name type", then a tab and the usage on the same line when
          the head is a one-letter bool flag, else on the next line after
          four blanks and a tab.
        - string defaults are quoted: (default "foo").
        - tabs expand to eight columns on output.
        """
        console = Console(file=self.output, soft_wrap=True, highlight=False, emoji=False, markup=False)
        for name in sorted(self._formal):
            flag = self._formal[name]
            type_name, usage = unquote_usage(flag)
            line = "  -" + name
            if type_name:
                line += " " + type_name
            line += "\t" if len(line) <= 4 else "\n    \t"
            line += usage.replace("\n", "\n    \t")
            if flag.default not in ("", "0", "false", "[]"):
                if isinstance(flag.value, _TypedValue) and flag.value.kind is FlagKind.STRING:
                    line += " (default %s)" % quote(flag.default)
                else:
                    line += " (default %s)" % flag.default
            console.print(Text(line))

    def _default_usage(self):
        console = Console(file=self.output, soft_wrap=True, highlight=False, emoji=False, markup=False)
        console.print(Text("Usage of %s:" % self.name))
        self.print_defaults()

    def _fail(self, fault):
        fault = fault.__replace__(prog=self.name)
        if self.on_error == "raise":
            raise fault
        if not isinstance(fault, HelpRequested):
            trigger(fault, shell=True, deferred=True, console=Console(file=self.output, highlight=False))
        self.usage()
        if self.on_error == "exit":
            sys.exit(0 if isinstance(fault, HelpRequested) else 2)
        raise fault

    def _parse_one(self, tokens, position):
        """
        consume one flag (and its value) from tokens.

        returns False when parsing must stop: no tokens left, a non-flag
        token, a lone '-', or the '--' terminator (which is consumed).
        """
        if not tokens:
            return False
        token = tokens[0]
        if len(token) < 2 or token[0] != "-":
            return False

        dashes = 1
        if token[1] == "-":
            dashes += 1
            if len(token) == 2:
                tokens.popleft()
                return False

        name = token[dashes:]
        if not name or name[0] in "-=":
            return self._fail(MalformedTokenError(
                "bad flag syntax %r at %s position" % (token, ordinal(position)),
                title="malformed flag",
                code=FaultCode.MALFORMED_TOKEN,
                hint="spell flags as -name, --name or --name=value",
                token=token,
                position=position,
            ))

        tokens.popleft()
        name, equals, raw = name.partition("=")
        spelled = "-" * dashes + name

        try:
            flag = self._formal[name]
        except KeyError:
            if name in ("help", "h"):
                return self._fail(HelpRequested(
                    "help requested",
                    title="help requested",
                    code=FaultCode.HELP_REQUESTED,
                    position=position,
                ))
            suggestions = difflib.get_close_matches(name, self._formal.keys(), 5)
            try:
                hint = "did you mean %s%s?" % ("-" * dashes, suggestions[0])
            except IndexError:
                hint = "try '%s --help' to see all available flags" % self.name
            return self._fail(UnknownFlagError(
                "flag provided but not defined: %s at %s position" % (spelled, ordinal(position)),
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint=hint,
                flag=name,
                suggestions=suggestions,
                position=position,
            ))

        if getattr(flag.value, "is_bool_flag", False):
            if not equals:
                raw = "true"
        elif not equals:
            if not tokens:
                return self._fail(MissingValueError(
                    "flag needs an argument: %s at %s position" % (spelled, ordinal(position)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass a value after the flag (for example: %s=<value>)" % spelled,
                    flag=name,
                    position=position,
                ))
            raw = tokens.popleft()

        try:
            flag.value.set(raw)
        except ValueError as error:
            reason = error.options.get("reason", error.message) if isinstance(error, MalformedValueError) else str(error)
            fault = MalformedValueError(
                "invalid value %r for flag %s at %s position: %s" % (raw, spelled, ordinal(position), reason),
                title="malformed value",
                code=FaultCode.MALFORMED_VALUE,
                hint=getattr(error, "options", {}).get("hint", "check the value given to %s" % spelled),
                flag=name,
                raw=raw,
                reason=reason,
                position=position,
            )
            fault.__cause__ = error
            return self._fail(fault)

        self._actual[name] = flag
        return True

    def parse(self, arguments=Unset, /):
        """
        parse flags from arguments (sys.argv[1:] by default).

        must be called after every flag is registered and before the values
        are read. the tokens after the last flag are available in args.
        """
        self._parsed = True
        arguments = list(coalesce(arguments, sys.argv[1:]))
        tokens = deque(arguments)
        while self._parse_one(tokens, len(arguments) - len(tokens) + 1):
            pass
        self._args = list(tokens)


command_line = FlagSet(on_error="exit")
"""
process-wide default flag set, used by FlagBuilder() when no set is given.
"""


def reset_command_line(name=Unset, /, *, on_error="exit"):
    """
    replace the process-wide flag set with a fresh one and return it.
    """
    global command_line
    command_line = FlagSet(name, on_error=on_error)
    return command_line


def parse_command_line(arguments=Unset, /):
    """
    parse the process-wide flag set (sys.argv[1:] by default).
    """
    command_line.parse(arguments)


__all__ = (
    "Flag",
    "FlagSet",
    "unquote_usage",
    "reset_command_line",
    "parse_command_line",
)
