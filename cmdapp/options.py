r"""
cmdapp option descriptors and the option registry.

Overview
- Option: one declared flag, identified by an optional short code and a
  mandatory long name, shaped by a compiled behavior string (see behaviors).
- Registry: the ordered collection of options of one application, with lookup
  by short code or long name and the per-scan state (results, occurrence count).

Metadata (sanitized on construction)
- short: None | str, a single ASCII letter or digit.
- name: str matching r"[^\W_](-?[^\W_]+)*" (no leading dashes, no '=').
- behavior: str, compiled immediately; a malformed string raises GrammarError.
- metavar: Unset | str (label of the argument in help).
- descr: Unset | str | Text (short help).

Per-scan state
- passed: whether the option occurred in the most recent scan.
- count: how many times it occurred.
- value: the argument of its last occurrence (None when absent).

Quick example:
    >>> registry = Registry()
    >>> registry.register(Option("o", "output", "."))
    >>> registry.by_short("o").takes_argument
    True
"""
import re

from rich.text import Text

from .behaviors import compile_behavior
from .utils import *
from .utils import IntrospectableType


class Option(metaclass=IntrospectableType):
    """
    Declared command-line option.

    The compiled behavior is exposed both as the `behavior` record and through
    flattened read-only properties (takes_argument, optional, multiflag,
    quantifier, negated, refs) for convenience.
    """

    __introspectable__ = (
        "short",
        "name",
        "behavior",
        "metavar",
        "descr",
        "passed",
        "count",
        "value",
    )

    __displayable__ = (
        "short",
        "name",
        "behavior",
        "passed",
        "value",
    )

    def __new__(cls, short, name, behavior="", /, metavar=Unset, descr=Unset):
        """
        Construct an Option.

        Parameters
        - short: None | str
          Single ASCII letter or digit, or None for a long-only option.
        - name: str
          Long name, used as "--name" on the command line.
        - behavior: str
          Behavior string (see cmdapp.behaviors).
        - metavar: Unset | str
          Label of the argument in help; defaults to the long name.
        - descr: Unset | str | Text
          Short description for help.

        Raises
        - TypeError/ValueError: on invalid metadata.
        - GrammarError: when behavior is malformed.
        """
        if short is not None and not isinstance(short, str):
            raise TypeError(f"{cls.__typename__} 'short' must be a string or None")
        if isinstance(short, str) and not re.fullmatch(r"[A-Za-z0-9]", short):
            raise ValueError(f"{cls.__typename__} 'short' must be a single ASCII letter or digit")

        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[^\W_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} 'name' must be a valid long option name (without leading dashes)")

        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")

        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

        self = super().__new__(cls)
        self._short = short
        self._name = name
        self._behavior = compile_behavior(behavior)
        self._metavar = coalesce(metavar)
        self._descr = coalesce(descr)
        self._passed = False
        self._count = 0
        self._value = None
        return self

    @property
    def takes_argument(self):
        return self._behavior.takes_argument

    @property
    def optional(self):
        return self._behavior.optional

    @property
    def multiflag(self):
        return self._behavior.multiflag

    @property
    def quantifier(self):
        return self._behavior.quantifier

    @property
    def negated(self):
        return self._behavior.negated

    @property
    def refs(self):
        return self._behavior.refs

    @property
    def label(self):
        """
        The most compact spelling of this option ("-a", or "--name" when long-only).
        """
        return "-" + self._short if self._short else "--" + self._name


class Registry:
    """
    Ordered collection of options plus the state of the most recent scan.

    Lookup
    - by_short(code) and by_name(name) return the matching Option or None.
    - A short code registered twice keeps resolving to the first option.

    Scan state
    - results: the ParseResult sequence of the most recent scan.
    - count: number of option occurrences in the most recent scan (a bundle
      counts once per bundled option).
    - reset() clears both and every option's passed/count/value.
    """

    options = mirror("options")
    results = mirror("results")
    count = mirror("count")

    def __init__(self):
        self._options = []
        self._shorts = {}
        self._names = {}
        self._results = []
        self._count = 0

    def __len__(self):
        return len(self._options)

    def __iter__(self):
        return iter(tuple(self._options))

    def __contains__(self, option):
        return option in self._options

    def __repr__(self):
        return "registry(options=%r)" % [option.label for option in self._options]

    def register(self, option, /):
        """
        Add an option.

        Raises
        - TypeError: when option is not an Option.
        - ValueError: when the option, or another one with the same long name,
          is already registered.

        Returns
        - True when the short code was free (or absent), False when it was
          already taken (the earlier option keeps winning short lookups).
        """
        if not isinstance(option, Option):
            raise TypeError("register() argument must be an option")
        if option.name in self._names:
            raise ValueError(f"option name {option.name!r} is already in use")
        self._options.append(option)
        self._names[option.name] = option
        if option.short is None:
            return True
        return self._shorts.setdefault(option.short, option) is option

    def by_short(self, short, /):
        return self._shorts.get(short)

    def by_name(self, name, /):
        return self._names.get(name)

    def record(self, result, /):
        """
        Append a scan result, updating the per-scan state of its option.
        """
        self._results.append(result)
        if (option := result.option) is not None:
            option._passed = True
            option._count += 1
            option._value = result.argument
            self._count += 1

    def reset(self):
        """
        Forget the previous scan: results, occurrence counter and option state.
        """
        self._results.clear()
        self._count = 0
        for option in self._options:
            option._passed = False
            option._count = 0
            option._value = None


__all__ = (
    "Option",
    "Registry",
)
