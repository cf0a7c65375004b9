"""
cmdapp dispatcher.

Replays parse results, in scan order, into callbacks:

- option results whose long name is "help"/"version" go to the built-in
  helper/versioner when one is given;
- other option results go to on_option(short, name, argument, context);
- positional results go to on_argument(argument, context).

Missing callbacks simply produce no dispatch. An exception raised by a user
callback is delegated as DelegatedCallbackError (the original exception is
chained as its cause) and stops the replay.
"""
from .faults import *
from .results import ParseResult
from .utils import *


def _delegate(callback, arguments, label, error):
    return DelegatedCallbackError(
        "%s callback raised %s for %s: %s" % (
            getattr(callback, "__name__", "anonymous"), type(error).__name__, label, error
        ),
        title="callback failed",
        code=FaultCode.DELEGATED_ERROR,
        hint="see the chained exception for details",
        arguments=arguments,
        error=error,
        docs=getdoc(FaultCode.DELEGATED_ERROR),
    )


def dispatch(results, context=None, /, *, on_option=Unset, on_argument=Unset, helper=Unset, versioner=Unset):
    """
    Dispatch results to callbacks in order.

    Parameters
    - results: Iterable[ParseResult]
    - context: any value, forwarded untouched to the user callbacks.
    - on_option: Callable[[str | None, str, str | None, Any], Any]
    - on_argument: Callable[[str, Any], Any]
    - helper / versioner: Callable[[], Any], built-in renderers for the options
      named "help" and "version". When Unset, those options are forwarded to
      on_option like any other.

    Raises
    - TypeError: when a result is not a ParseResult.
    - DelegatedCallbackError: when a user callback raises.
    """
    renderers = {"help": helper, "version": versioner}

    for result in results:
        if not isinstance(result, ParseResult):
            raise TypeError("dispatch() argument must be an iterable of parse results")

        if (option := result.option) is None:
            if on_argument is Unset:
                continue
            callback, arguments = on_argument, (result.argument, context)
            label = "argument %r" % result.argument
        else:
            if renderers.get(option.name, Unset) is not Unset:
                renderers[option.name]()
                continue
            if on_option is Unset:
                continue
            callback, arguments = on_option, (option.short, option.name, result.argument, context)
            label = "option %r" % option.label

        try:
            callback(*arguments)
        except Exception as error:
            raise _delegate(callback, arguments, label, error) from error


__all__ = (
    "dispatch",
)
