"""
cmdapp argument scanner.

Turns an argument vector into the flat, ordered ParseResult sequence of a
Registry, in a single left-to-right pass with one piece of lookahead state: the
pending option, i.e. an option that takes an argument but had none attached.

Token rules (argv[0] is the program name and is never scanned)
- after "--" (with end-of-options enabled) every token is positional;
- "-" alone is positional (conventionally stdin);
- "--" alone ends option processing, or is positional when disabled;
- "--name" / "--name=value" is a long option;
- "-xyz" is either a multiflag bundle (x, y and z all multiflags) or the short
  option x with the attached argument "yz" (see resolve_short);
- anything else is positional, or the argument of the pending option.

Every failure raises immediately, naming the offending token and its position.
"""
from .faults import *
from .options import Registry
from .results import *
from .utils import *


def resolve_short(registry, token, /, index=1):
    """
    Decide what a short option token "-x..." stands for.

    Returns
    - (options, attached): a tuple of the options the token names and the
      attached argument (None when there is none).
      • "-x"     → ((x,), None)
      • "-xyz"   → ((x, y, z), None) when x is a multiflag; y and z must then be
                   multiflags too.
      • "-xfoo"  → ((x,), "foo") when x is not a multiflag; x must then take an
                   argument.

    Raises
    - UnknownOptionError: x (or any bundled character) is not registered.
    - BundlingError: a bundle mixes in a non-multiflag option.
    - UnexpectedArgumentError: trailing characters for an option taking no argument.

    Nothing is recorded; the whole token is validated before returning.
    """
    character, rest = token[1], token[2:]
    if (leader := registry.by_short(character)) is None:
        raise _unknown(token, character, index)
    if not rest:
        return (leader,), None

    if leader.multiflag:
        options = [leader]
        for character in rest:
            if (option := registry.by_short(character)) is None:
                raise _unknown(token, character, index)
            if not option.multiflag:
                raise BundlingError(
                    "option '-%s' in %r at %s position cannot be bundled with other options" % (
                        character, token, ordinal(index)
                    ),
                    title="invalid bundle",
                    code=FaultCode.INVALID_BUNDLE,
                    hint="pass '-%s' as a separate argument" % character,
                    token=token,
                    index=index,
                    option=option,
                    docs=getdoc(FaultCode.INVALID_BUNDLE),
                )
            options.append(option)
        return tuple(options), None

    if leader.takes_argument:
        return (leader,), rest

    if all(registry.by_short(character) is not None for character in rest):
        raise BundlingError(
            "option '-%s' in %r at %s position cannot be bundled with other options" % (
                leader.short, token, ordinal(index)
            ),
            title="invalid bundle",
            code=FaultCode.INVALID_BUNDLE,
            hint="pass '-%s' as a separate argument" % leader.short,
            token=token,
            index=index,
            option=leader,
            docs=getdoc(FaultCode.INVALID_BUNDLE),
        )
    raise _unexpected(token, leader, rest, index)


def _unknown(token, input, index):
    if token.startswith("--"):
        code, spelling = FaultCode.UNKNOWN_LONG_OPTION, "--" + input
    else:
        code, spelling = FaultCode.UNKNOWN_SHORT_OPTION, "-" + input
    return UnknownOptionError(
        "unknown option %r at %s position" % (spelling, ordinal(index)),
        title="unknown option",
        code=code,
        hint="try '--help' to list the available options",
        token=token,
        index=index,
        input=spelling,
        docs=getdoc(code),
    )


def _unexpected(token, option, argument, index):
    return UnexpectedArgumentError(
        "option %r at %s position does not take an argument (got %r)" % (option.label, ordinal(index), argument),
        title="unexpected argument",
        code=FaultCode.UNEXPECTED_ARGUMENT,
        hint="pass %r on its own" % option.label,
        token=token,
        index=index,
        option=option,
        argument=argument,
        docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT),
    )


class Scanner:
    """
    Stateful scanner bound to one Registry.

    Calling the scanner with an argument vector resets the registry, scans the
    vector and returns the recorded results as a tuple.
    """

    def __init__(self, registry, /, *, end_of_options=True):
        if not isinstance(registry, Registry):
            raise TypeError("Scanner() argument must be a registry")
        self._registry = registry
        self._end_of_options = bool(end_of_options)
        self._pending = None
        self._terminated = False

    def __call__(self, argv, /):
        argv = list(argv)
        for token in argv:
            if not isinstance(token, str):
                raise TypeError("scan() argument must be an iterable of strings")

        self._registry.reset()
        self._pending = None
        self._terminated = False

        for index, token in enumerate(argv[1:], 1):
            self._handle(token, index)
        self._settle()

        return tuple(self._registry.results)

    def _handle(self, token, index):
        if self._terminated or token == "-":
            return self._positional(token)
        if token == "--":
            if self._end_of_options:
                self._terminated = True
                return
            return self._positional(token)
        if not token.startswith("-"):
            return self._positional(token)

        # An option-looking token first settles the pending option.
        self._settle()
        if token.startswith("--"):
            return self._long(token, index)
        return self._short(token, index)

    def _positional(self, token):
        if self._pending is None:
            return self._registry.record(Positional(token))
        option, _ = self._pending
        self._pending = None
        self._registry.record(ValuedOption(option, token))

    def _settle(self):
        if self._pending is None:
            return
        option, start = self._pending
        self._pending = None
        if option.optional:
            return self._registry.record(BareOption(option))
        raise MissingArgumentError(
            "option %r at %s position requires an argument" % (option.label, ordinal(start)),
            title="missing argument",
            code=FaultCode.MISSING_ARGUMENT,
            hint="provide a value right after %s (for example: %s VALUE)" % (option.label, option.label),
            index=start,
            option=option,
            docs=getdoc(FaultCode.MISSING_ARGUMENT),
        )

    def _long(self, token, index):
        name, separator, argument = token[2:].partition("=")
        if (option := self._registry.by_name(name)) is None:
            raise _unknown(token, name, index)
        if separator:
            if not option.takes_argument:
                raise _unexpected(token, option, argument, index)
            return self._registry.record(ValuedOption(option, argument))
        self._accept(option, index)

    def _short(self, token, index):
        options, attached = resolve_short(self._registry, token, index)
        if attached is not None:
            option, = options
            return self._registry.record(ValuedOption(option, attached))
        for option in options:
            self._accept(option, index)

    def _accept(self, option, index):
        if option.takes_argument:
            self._pending = (option, index)
        else:
            self._registry.record(BareOption(option))


def scan(registry, argv, /, *, end_of_options=True):
    """
    Scan an argument vector against a registry.

    Parameters
    - registry: Registry of declared options (its scan state is reset first).
    - argv: Iterable[str], argv[0] being the program name.
    - end_of_options: whether "--" ends option processing.

    Returns
    - tuple[ParseResult, ...] in scan order.

    Raises
    - UnknownOptionError, MissingArgumentError, UnexpectedArgumentError, BundlingError.
    """
    return Scanner(registry, end_of_options=end_of_options)(argv)


__all__ = (
    "Scanner",
    "scan",
    "resolve_short",
)
