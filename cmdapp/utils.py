"""
cmdapp utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr); mutable
    containers are handed out as fresh copies.

- ordinal(number)
  • Human-friendly ordinal for 1-based positions ("first", "second", ..., "11th").

- IntrospectableType
  • Metaclass publishing __introspectable__ names as read-only properties with a
    stable __repr__/__rich_repr__ (shared by options and applications).

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Use mirror() to expose internal state safely as read-only properties.
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
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
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                # Some callables (e.g., built-ins) disallow attribute updates.
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy mutable container values.

    Behavior
    - tuple (including named tuples): returned as-is, it is already immutable.
    - Sequence (non-string): returns a new list with each element processed.
    - Mapping: returns a new dict, preserving keys and processing values.
    - Set: returns a new set with each element processed.
    - Anything else: returned as-is.
    """
    if isinstance(object, tuple | str):
        return object
    elif isinstance(object, Sequence):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return coalesce(object)


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a copy
    for mutable container types.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing in messages.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    if not isinstance(number, int):
        raise TypeError("ordinal() argument must be an integer")
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


class IntrospectableType(type):
    """
    Metaclass that exposes declared fields as read-only properties.

    Responsibilities
    - Publish a mirror() property for every name listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics (rich.pretty).

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      for consistent, human-friendly labels in messages.
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
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(short='a', name='aa', ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
