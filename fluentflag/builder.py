r"""
fluentflag builder: declare flags fluently, then bind them to storage.

Overview
- FlagBuilder
  • Owns a FlagSet (the process-wide one by default), one factory per kind
    (bool_flag, string_flag, int_flag, int64_flag, float64_flag, uint_flag,
    uint64_flag) and the usage text of everything it bound.
  • Two states: idle, or pending on exactly one FluentFlag. Declaring a new
    flag while one is pending raises UnbuiltFlagError.
- FluentFlag
  • Chainable configuration (alias, default) ending in one binding call:
    build(target, attribute="value"), build_var() or build_slice().

Quick example:
    >>> builder = FlagBuilder(FlagSet("tool"))
    >>> name = builder.string_flag("name", "who to greet").alias("n").default("world").build_var()
    >>> tags = builder.string_flag("tag", "repeatable tag").alias("t").build_slice()
    >>> builder.flag_set.parse(["-n", "you", "--tag=a", "-t", "b"])
    >>> name.value, tags
    ('you', ['a', 'b'])
"""
import functools
import sys

from rich.console import Console

from . import flagset
from .faults import *
from .usage import styled_usage, usage_line, usage_text
from .utils import *
from .values import Accumulator, FlagKind, Ref, coerce


class FluentFlag:
    """
    configuration of one flag prior to binding.

    read-only state
    - name, kind, descr (usage text), short (alias character or None),
      default_value (configured default or the kind's zero value), bound.
    """

    def __init__(self, builder, kind, name, usage=""):
        self._builder = builder
        self._kind = kind
        self._name = name
        self._descr = usage
        self._alias = Unset
        self._default = Unset
        self._bound = False

    @property
    def builder(self):
        return self._builder

    @property
    def kind(self):
        return self._kind

    @property
    def name(self):
        return self._name

    @property
    def descr(self):
        return self._descr

    @property
    def short(self):
        return coalesce(self._alias)

    @property
    def default_value(self):
        return coalesce(self._default, self._kind.zero)

    @property
    def bound(self):
        return self._bound

    def _configurable(self, operation):
        if self._bound:
            raise FlagAlreadyBuiltError(
                "flag %r is already built; %s() must come before build" % (self._name, operation),
                title="flag already built",
                code=FaultCode.FLAG_ALREADY_BUILT,
                hint="chain %s() before build(), build_var() or build_slice()" % operation,
                flag=self._name,
            )

    def alias(self, alias, /):
        r"""
        set a single-character short form (-a); "\0" means no short form.
        """
        self._configurable("alias")
        if not isinstance(alias, str):
            raise TypeError("flag alias must be a single character string")
        elif len(alias) != 1:
            raise ValueError("flag alias must be exactly one character, got %r" % alias)
        self._alias = Unset if alias == "\0" else alias
        return self

    def default(self, value, /):
        """
        set the value used when the flag is absent (ignored by build_slice).
        """
        self._configurable("default")
        self._default = coerce(value, self._kind)
        return self

    def _names(self):
        yield self._name, self._descr
        if self._alias is not Unset:
            yield self._alias, ""

    def _register(self, register):
        try:
            for name, usage in self._names():
                register(name, usage)
        finally:
            self._builder._release(self)
        self._bound = True
        self._builder._record(self)

    def build(self, target, attribute="value", /):
        """
        register the long form and the alias, both writing into target.attribute.

        the default is written to the target immediately. binding a name
        already registered in the flag set raises FlagRedefinedError.
        """
        flags = self._builder.flag_set
        self._register(lambda name, usage: flags.typed_var(
            self._kind, target, name, self.default_value, usage, attribute=attribute
        ))

    def build_var(self):
        """
        like build(), into a fresh Ref which is returned.
        """
        ref = Ref(self.default_value)
        self.build(ref)
        return ref

    def build_slice(self):
        """
        register the flag as repeatable and return the list collecting every occurrence.

        the list always starts empty: a configured default is silently
        ignored here, though usage() still shows it.
        """
        values = []
        accumulator = Accumulator(self._kind, values)
        flags = self._builder.flag_set
        self._register(lambda name, usage: flags.var(accumulator, name, usage))
        return values

    def usage(self):
        """aligned usage block for this flag."""
        return usage_line(self)

    def __rich__(self):
        return styled_usage(self)

    def __repr__(self):
        return "fluent-flag(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "kind", self._kind
        yield "descr", self._descr
        yield "short", self.short
        yield "default", self.default_value
        yield "bound", self._bound


class FlagBuilder:
    """
    fluent declaration front-end over a FlagSet.

    state machine
    - idle: no pending flag. A factory call returns a FluentFlag and goes pending.
    - pending: a binding call on the pending flag returns to idle and records
      it for usage. Any factory call raises UnbuiltFlagError.
    """

    def __init__(self, flag_set=None, /):
        self._flag_set = flag_set if flag_set is not None else flagset.command_line
        self._built = []
        self._pending = None
        self._output = Unset

    def __repr__(self):
        return f"FlagBuilder({self._flag_set!r})"

    @property
    def flag_set(self):
        return self._flag_set

    @property
    def pending(self):
        return self._pending

    @property
    def built(self):
        return tuple(self._built)

    @property
    def output(self):
        return coalesce(self._output, sys.stderr)

    def set_output(self, file, /):
        """write usage to file instead of standard error."""
        self._output = file

    def flag(self, kind, name, usage=""):
        """
        declare a flag of the given kind; prefer the typed factories.
        """
        if not isinstance(kind, FlagKind):
            raise UnsupportedTypeError(
                "unsupported flag type %r" % (kind,),
                title="unsupported flag type",
                code=FaultCode.UNSUPPORTED_TYPE,
                hint="use one of: %s" % ", ".join(member.value for member in FlagKind),
                kind=kind,
            )
        if self._pending is not None:
            raise UnbuiltFlagError(
                "previous flag %r not built (call build, build_var, or build_slice)" % self._pending.name,
                title="unbuilt flag",
                code=FaultCode.UNBUILT_FLAG,
                hint="finish %r with build(), build_var() or build_slice() before declaring %r" % (
                    self._pending.name,
                    name,
                ),
                flag=self._pending.name,
            )
        self._pending = FluentFlag(self, kind, name, usage)
        return self._pending

    bool_flag = functools.partialmethod(flag, FlagKind.BOOL)
    string_flag = functools.partialmethod(flag, FlagKind.STRING)
    int_flag = functools.partialmethod(flag, FlagKind.INT)
    int64_flag = functools.partialmethod(flag, FlagKind.INT64)
    float64_flag = functools.partialmethod(flag, FlagKind.FLOAT64)
    uint_flag = functools.partialmethod(flag, FlagKind.UINT)
    uint64_flag = functools.partialmethod(flag, FlagKind.UINT64)

    def _release(self, flag):
        if self._pending is flag:
            self._pending = None

    def _record(self, flag):
        self._built.append(flag)

    def usage(self):
        """usage text for every bound flag, in binding order."""
        return usage_text(self._built)

    def print_usage(self):
        """write usage() to the output, styled when it is a terminal."""
        output = self.output
        colorful = getattr(output, "isatty", lambda: False)()
        console = Console(file=output, soft_wrap=True, highlight=False, emoji=False, markup=False)
        for flag in self._built:
            console.print(styled_usage(flag, colorful=colorful))


__all__ = (
    "FluentFlag",
    "FlagBuilder",
)
