"""
cmdapp parse results.

A scan produces a flat, ordered sequence of ParseResult values. ParseResult is
a closed sum type with exactly three variants:

- ValuedOption(option, argument): an option occurrence carrying an argument.
- BareOption(option): an option occurrence without an argument.
- Positional(argument): a bare positional argument.

Every variant exposes both `option` and `argument` (the absent side is None)
and supports structural pattern matching:

    match result:
        case ValuedOption(option, argument): ...
        case BareOption(option): ...
        case Positional(argument): ...

Results are immutable and compare by value (options by identity).
"""
from .options import Option

_sealed = False


class ParseResult:
    """
    Base of the three result variants; it cannot be instantiated or extended.
    """
    __slots__ = ("_option", "_argument")

    def __new__(cls, *args, **kwargs):
        if cls is ParseResult:
            raise TypeError("type 'ParseResult' cannot be instantiated directly")
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        if _sealed:
            raise TypeError(f"type {cls.__base__.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)

    def _assign(self, option, argument):
        if option is not None and not isinstance(option, Option):
            raise TypeError(f"{type(self).__name__} 'option' must be an option")
        if argument is not None and not isinstance(argument, str):
            raise TypeError(f"{type(self).__name__} 'argument' must be a string")
        object.__setattr__(self, "_option", option)
        object.__setattr__(self, "_argument", argument)

    @property
    def option(self):
        return self._option

    @property
    def argument(self):
        return self._argument

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._option is other._option and self._argument == other._argument

    def __hash__(self):
        return hash((type(self), id(self._option), self._argument))

    def __rich_repr__(self):
        for name in type(self).__match_args__:
            object = getattr(self, name)
            yield name, object.label if isinstance(object, Option) else object

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


class ValuedOption(ParseResult):
    __slots__ = ()
    __match_args__ = ("option", "argument")

    def __init__(self, option, argument, /):
        if option is None or argument is None:
            raise TypeError("ValuedOption requires both an option and an argument")
        self._assign(option, argument)


class BareOption(ParseResult):
    __slots__ = ()
    __match_args__ = ("option",)

    def __init__(self, option, /):
        if option is None:
            raise TypeError("BareOption requires an option")
        self._assign(option, None)


class Positional(ParseResult):
    __slots__ = ()
    __match_args__ = ("argument",)

    def __init__(self, argument, /):
        if argument is None:
            raise TypeError("Positional requires an argument")
        self._assign(None, argument)


_sealed = True


__all__ = (
    "ParseResult",
    "ValuedOption",
    "BareOption",
    "Positional",
)
