"""
cmdapp constraint verifier.

Runs after a successful scan and checks every occurrence of an option declared
with a quantifier against its references (short codes resolved fresh through
the registry):

- ANY  (@): at least one reference was passed.
- ALL  (&): every reference was passed.
- ONLY (<): the options passed besides this one are all drawn from the
  references. This is counted globally: the number of option occurrences in
  the scan, minus this option's own occurrences, must not exceed the number of
  references that were passed.

A leading '!' negates the verdict. Verification stops at the first violation.
"""
from .behaviors import Quantifier
from .faults import *
from .options import Registry


def _enumerate(labels, conjunction):
    match len(labels):
        case 0:
            return ""
        case 1:
            return labels[0]
        case _:
            return "%s %s %s" % (", ".join(labels[:-1]), conjunction, labels[-1])


def describe(option, /):
    """
    Return the human phrase for an option's quantifier clause.

    The phrase completes a sentence starting with the option itself, e.g.
    "-d " + "can only be used with -a or -O". It is empty for options without
    a quantifier and for clauses that can never be violated.
    """
    labels = ["-" + ref for ref in option.refs]
    match option.quantifier, option.negated:
        case Quantifier.NONE, _:
            return ""
        case Quantifier.ANY, False:
            return "requires %s" % _enumerate(labels, "or") if labels else "cannot be used"
        case Quantifier.ANY, True:
            return "cannot be used with %s" % _enumerate(labels, "or") if labels else ""
        case Quantifier.ALL, False:
            return "requires %s" % _enumerate(labels, "and") if labels else ""
        case Quantifier.ALL, True:
            return "cannot be used together with %s" % _enumerate(labels, "and") if labels else "cannot be used"
        case Quantifier.ONLY, False:
            return "can only be used with %s" % _enumerate(labels, "or") if labels else "must be used alone"
        case Quantifier.ONLY, True:
            return "requires an option other than %s" % _enumerate(labels, "or") if labels else "cannot be used alone"


def _resolve(registry, option, ref):
    if (target := registry.by_short(ref)) is None:
        raise ConfigError(
            "option %r refers to unknown option '-%s'" % (option.label, ref),
            title="unresolved reference",
            code=FaultCode.UNRESOLVED_REFERENCE,
            hint="register '-%s' or fix the behavior of %r" % (ref, option.label),
            option=option,
            ref=ref,
            docs=getdoc(FaultCode.UNRESOLVED_REFERENCE),
        )
    if target is option:
        raise ConfigError(
            "option %r refers to itself" % option.label,
            title="self reference",
            code=FaultCode.SELF_REFERENCE,
            hint="remove '%s' from the behavior of %r" % (ref, option.label),
            option=option,
            ref=ref,
            docs=getdoc(FaultCode.SELF_REFERENCE),
        )
    return target


def check(registry, option, /):
    """
    Evaluate one option's clause against the current scan state.

    Returns
    - bool: the verdict after negation (True for options without a quantifier).

    Raises
    - ConfigError: a reference is unknown or points to the option itself.
    """
    if option.quantifier is Quantifier.NONE:
        return True
    passed = [_resolve(registry, option, ref).passed for ref in option.refs]
    match option.quantifier:
        case Quantifier.ANY:
            verdict = any(passed)
        case Quantifier.ALL:
            verdict = all(passed)
        case Quantifier.ONLY:
            verdict = registry.count - option.count <= sum(passed)
    return verdict != option.negated


def verify(registry, /):
    """
    Verify the quantifier clauses of every option occurrence of the last scan.

    Raises
    - ConfigError: on an unresolvable or self-referencing quantifier reference.
    - ConstraintViolationError: on the first false verdict, in scan order.
    """
    if not isinstance(registry, Registry):
        raise TypeError("verify() argument must be a registry")

    codes = {
        Quantifier.ANY: FaultCode.ANY_VIOLATED,
        Quantifier.ALL: FaultCode.ALL_VIOLATED,
        Quantifier.ONLY: FaultCode.ONLY_VIOLATED,
    }

    for result in registry.results:
        if (option := result.option) is None or check(registry, option):
            continue
        code = codes[option.quantifier]
        raise ConstraintViolationError(
            "option %r %s" % (option.label, describe(option)),
            title="incompatible options",
            code=code,
            hint="try '--help' to see how options can be combined",
            option=option,
            docs=getdoc(code),
        )


__all__ = (
    "describe",
    "check",
    "verify",
)
