r"""
cmdapp behavior grammar.

A behavior string is a compact, per-option description of how an option takes
its argument and how it relates to other options:

    behavior  := [ "." [ "?" ] | "*" ] { "?" | " " | "\t" } [ [ "!" ] quantifier refs ]
    quantifier := "@" (ANY) | "&" (ALL) | "<" (ONLY)
    refs      := { ASCII letter or digit }

Examples
- ""      → plain flag
- "."     → takes a required argument
- ".?"    → takes an optional argument
- "*"     → can be bundled with other multiflags (-abc)
- "&ad"   → requires both -a and -d
- "!@bc"  → cannot be used with -b or -c
- "<"     → must be used alone

compile_behavior() turns such a string into an immutable Behavior record. The
tokenizer is an explicit state machine (PREFIX → OPTIONAL → SKIP → SYMBOL → REFS)
so every grammar rule maps onto exactly one state.
"""
import functools
from collections import deque, namedtuple
from enum import Enum, auto

from .faults import GrammarError, FaultCode, getdoc
from .utils import ordinal


class Quantifier(Enum):
    """
    Compatibility rule relating one option's presence to other options.

    The value of each member is its introducer character in a behavior string.
    """
    NONE = ""
    ANY = "@"
    ALL = "&"
    ONLY = "<"


Behavior = namedtuple("Behavior", (
    "takes_argument",
    "optional",
    "multiflag",
    "quantifier",
    "negated",
    "refs",
), defaults=(False, False, False, Quantifier.NONE, False, ()))


class _State(Enum):
    PREFIX = auto()
    OPTIONAL = auto()
    SKIP = auto()
    SYMBOL = auto()
    REFS = auto()


def _malformed(source, message, hint, /, index=None):
    return GrammarError(
        message,
        title="malformed behavior",
        code=FaultCode.MALFORMED_BEHAVIOR,
        hint=hint,
        behavior=source,
        index=index,
        docs=getdoc(FaultCode.MALFORMED_BEHAVIOR),
    )


@functools.cache
def compile_behavior(source, /):
    """
    Compile a behavior string into a Behavior record.

    Parameters
    - source: str
      The behavior string; the empty string yields all defaults.

    Returns
    - Behavior(takes_argument, optional, multiflag, quantifier, negated, refs)

    Raises
    - TypeError: when source is not a string.
    - GrammarError: on any grammar violation; the message names the offending
      character and its position within the string.

    Notes
    - A quantifier with no refs is accepted (e.g. "<" means "must be used alone").
    """
    if not isinstance(source, str):
        raise TypeError("compile_behavior() argument must be a string")

    fields = {}
    refs = []
    state = _State.PREFIX
    characters = deque(enumerate(source, 1))

    while characters:
        index, character = characters[0]
        match state:
            case _State.PREFIX:
                if character == ".":
                    fields["takes_argument"] = True
                    state = _State.OPTIONAL
                    characters.popleft()
                elif character == "*":
                    fields["multiflag"] = True
                    state = _State.SKIP
                    characters.popleft()
                else:
                    state = _State.SKIP
            case _State.OPTIONAL:
                if character == "?":
                    fields["optional"] = True
                    characters.popleft()
                state = _State.SKIP
            case _State.SKIP:
                if character in "? \t":
                    characters.popleft()
                    continue
                if character == "!":
                    fields["negated"] = True
                    characters.popleft()
                state = _State.SYMBOL
            case _State.SYMBOL:
                try:
                    quantifier = Quantifier(character)
                except ValueError:
                    raise _malformed(
                        source,
                        "unexpected character %r at %s position of behavior %r" % (character, ordinal(index), source),
                        "a quantifier must be one of '@' (any), '&' (all) or '<' (only)",
                        index,
                    ) from None
                fields["quantifier"] = quantifier
                state = _State.REFS
                characters.popleft()
            case _State.REFS:
                if not (character.isascii() and character.isalnum()):
                    raise _malformed(
                        source,
                        "unexpected character %r at %s position of behavior %r" % (character, ordinal(index), source),
                        "quantifier references must be short option letters or digits",
                        index,
                    )
                refs.append(character)
                characters.popleft()

    if state is _State.SYMBOL:
        raise _malformed(
            source,
            "behavior %r ends with '!' but no quantifier follows" % source,
            "add '@', '&' or '<' after '!'",
            len(source),
        )

    if source and not (fields.get("takes_argument") or fields.get("multiflag") or "quantifier" in fields):
        raise _malformed(
            source,
            "behavior %r has neither an argument prefix, a multiflag prefix nor a quantifier" % source,
            "start with '.' (argument), '*' (multiflag) or a quantifier",
            1,
        )

    return Behavior(**fields, refs=tuple(refs))


__all__ = (
    "Quantifier",
    "Behavior",
    "compile_behavior",
)
