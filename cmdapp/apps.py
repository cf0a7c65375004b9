"""
cmdapp application context.

App is the explicit, owned context of one command-line program. It carries:

- metadata: program name, description, authors, copyright year, version triple,
  versioning information and usage synopses (used by the help/version renderers);
- the option Registry (opt()/long_opt() compile behaviors and register options);
- the user callbacks (on_option/on_argument) and an optional fault fallback;
- runtime flags: shell (render faults and exit instead of raising), fancy
  (panels) and colorful (styles).

parse() is the single entry point and runs scan → verify → dispatch. Faults of
any stage are surfaced through App.trigger(), which injects the runtime context
into the fault before handing it to the fallback or to faults.trigger().

Quick example:
    >>> app = App("demo", version=(1, 0, 0))
    >>> verbose = app.opt("v", "verbose")
    >>> output = app.opt("o", "output", ".")
    >>> app.parse(["demo", "-o", "out.txt"])
    (ValuedOption(option='-o', argument='out.txt'),)
    >>> output.value
    'out.txt'
"""
import datetime
import os
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .dispatcher import dispatch
from .faults import *
from .faults import console as diagnostics
from .options import Option, Registry
from .scanner import scan
from .utils import *
from .utils import IntrospectableType
from .verifier import describe, verify


class App(metaclass=IntrospectableType):
    """
    Command-line application: metadata, options, callbacks and runtime flags.

    Lifecycle
    - Construct with metadata and runtime flags (or use the setters later).
    - Register options with opt()/long_opt(), callbacks with on_option()/
      on_argument() (both usable as decorators).
    - Call parse() (or invoke(app)) once per invocation.

    Built-ins
    - Unless builtins=False, "--help" (-h) and "--version" (-v) are added before
      the first scan, each with behavior "<" (must be used alone). A short code
      already taken by a user option is left to that option.
    - They render help/version unless override_help/override_version is set, in
      which case they reach on_option like any other option.
    """

    __introspectable__ = (
        "descr",
        "authors",
        "year",
        "version",
        "versioning",
        "synopses",
        "end_of_options",
        "builtins",
        "override_help",
        "override_version",
        "shell",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "program",
        "descr",
        "version",
        "options",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(
            self,
            program=Unset,
            descr=Unset,
            authors=(),
            year=Unset,
            version=(0, 0, 0),
            versioning=Unset,
            synopses=(),
            *,
            end_of_options=True,
            builtins=True,
            override_help=False,
            override_version=False,
            shell=False,
            fancy=False,
            colorful=Unset,
    ):
        if not isinstance(program, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'program' must be a string")
        elif isinstance(program, str) and not (program := program.strip()):
            raise ValueError(f"{type(self).__typename__} 'program' cannot be empty")
        if isinstance(authors, str) or not isinstance(authors, Iterable):
            raise TypeError(f"{type(self).__typename__} 'authors' must be an iterable of strings")
        if isinstance(synopses, str) or not isinstance(synopses, Iterable):
            raise TypeError(f"{type(self).__typename__} 'synopses' must be an iterable of strings")
        if not isinstance(version, tuple) or len(version) != 3:
            raise TypeError(f"{type(self).__typename__} 'version' must be a (major, minor, patch) tuple")

        self._program = program
        self._invoked = Unset
        self._descr = None
        self._authors = []
        self._year = None
        self._version = (0, 0, 0)
        self._versioning = None
        self._synopses = []

        self._end_of_options = bool(end_of_options)
        self._builtins = bool(builtins)
        self._override_help = bool(override_help)
        self._override_version = bool(override_version)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        if colorful is Unset:
            colorful = diagnostics.is_terminal and "NO_COLOR" not in os.environ
        self._colorful = bool(colorful)

        self._registry = Registry()
        self._installed = False
        self._on_option = Unset
        self._on_argument = Unset
        self._fallback = Unset

        self.describe(coalesce(descr))
        for author in authors:
            self.add_author(author)
        self.set_year(coalesce(year))
        self.set_version(*version)
        self.set_versioning(coalesce(versioning))
        for synopsis in synopses:
            self.add_synopsis(synopsis)

    @property
    def program(self):
        """
        Program name: the explicit one, else the basename of argv[0] as invoked.
        """
        if self._program is not Unset:
            return self._program
        return os.path.basename(coalesce(self._invoked, sys.argv[0] if sys.argv else "")) or "program"

    @property
    def registry(self):
        return self._registry

    @property
    def options(self):
        return self._registry.options

    # --- metadata setters (None is ignored) ---

    def describe(self, descr, /):
        if descr is None:
            return
        if not isinstance(descr, str | Text):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        self._descr = descr

    def add_author(self, author, /):
        if author is None:
            return
        if not isinstance(author, str):
            raise TypeError(f"{type(self).__typename__} author must be a string")
        elif not (author := author.strip()):
            raise ValueError(f"{type(self).__typename__} author cannot be empty")
        self._authors.append(author)

    def set_year(self, year, /):
        if year is None:
            return
        if not isinstance(year, int) or isinstance(year, bool):
            raise TypeError(f"{type(self).__typename__} year must be an integer")
        if year < 0:
            raise ValueError(f"{type(self).__typename__} year cannot be negative")
        self._year = year

    def set_version(self, major, minor, patch, /):
        for number in (major, minor, patch):
            if not isinstance(number, int) or isinstance(number, bool):
                raise TypeError(f"{type(self).__typename__} version numbers must be integers")
            if number < 0:
                raise ValueError(f"{type(self).__typename__} version numbers cannot be negative")
        self._version = (major, minor, patch)

    def set_versioning(self, versioning, /):
        if versioning is None:
            return
        if not isinstance(versioning, str):
            raise TypeError(f"{type(self).__typename__} versioning information must be a string")
        self._versioning = versioning

    def add_synopsis(self, synopsis, /):
        if synopsis is None:
            return
        if not isinstance(synopsis, str):
            raise TypeError(f"{type(self).__typename__} synopsis must be a string")
        elif not (synopsis := synopsis.strip()):
            raise ValueError(f"{type(self).__typename__} synopsis cannot be empty")
        self._synopses.append(synopsis)

    # --- registration ---

    def opt(self, short, name, behavior="", /, *, metavar=Unset, descr=Unset):
        """
        Declare an option and return it.

        Parameters
        - short: None | str, single ASCII letter or digit.
        - name: str, long name (used as "--name").
        - behavior: str, behavior string (see cmdapp.behaviors).
        - metavar / descr: help metadata.

        The returned Option reflects, after each parse(), whether it was passed
        (passed/count) and its last argument (value).

        Raises
        - GrammarError (through trigger()): malformed behavior string.
        - TypeError/ValueError: invalid short code or name, or a duplicate name.

        A short code that is already taken emits ShadowedOptionWarning; the
        earlier option keeps it.
        """
        try:
            option = Option(short, name, behavior, metavar=metavar, descr=descr)
        except CommandException as fault:
            return self.trigger(fault)
        if not self._registry.register(option):
            self.trigger(ShadowedOptionWarning(
                "short option '-%s' of '--%s' is already used by %r" % (
                    short, name, "--" + self._registry.by_short(short).name
                ),
                title="shadowed short option",
                code=FaultCode.SHADOWED_SHORT_OPTION,
                hint="'--%s' is only reachable through its long name" % name,
                option=option,
                docs=getdoc(FaultCode.SHADOWED_SHORT_OPTION),
            ))
        return option

    def long_opt(self, name, behavior="", /, *, metavar=Unset, descr=Unset):
        """
        Declare a long-only option (no short code).
        """
        return self.opt(None, name, behavior, metavar=metavar, descr=descr)

    def _install(self):
        if not self._builtins or self._installed:
            return
        self._installed = True
        for short, name, descr in (
                ("h", "help", "print this help and exit"),
                ("v", "version", "print version information and exit"),
        ):
            if self._registry.by_name(name) is not None:
                continue
            if self._registry.by_short(short) is not None:
                short = None
            self._registry.register(Option(short, name, "<", descr=descr))

    # --- callbacks ---

    def on_option(self, callback, /):
        """
        Register the one-time option callback: callback(short, name, argument, context).

        Returns the callable, enabling decorator-style usage: @app.on_option
        """
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} option callback must be callable")
        if self._on_option is not Unset:
            raise TypeError(f"{type(self).__typename__} option callback cannot be overridden")
        self._on_option = callback
        return callback

    def on_argument(self, callback, /):
        """
        Register the one-time argument callback: callback(argument, context).
        """
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} argument callback must be callable")
        if self._on_argument is not Unset:
            raise TypeError(f"{type(self).__typename__} argument callback cannot be overridden")
        self._on_argument = callback
        return callback

    def fallback(self, fallback, /):
        """
        Register a one-time fallback handler for faults.

        The fallback receives every fault (errors and warnings) instead of it
        being raised, warned or rendered.
        """
        if not callable(fallback):
            raise TypeError(f"{type(self).__typename__} fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError(f"{type(self).__typename__} fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def trigger(self, fault, /, **options):
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = fault.__replace__(**options, app=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)
        if self._fallback is not Unset:
            self._fallback(fault)
        else:
            trigger(fault)

    # --- entry points ---

    def parse(self, argv=Unset, context=None, /):
        """
        Scan, verify and dispatch one invocation.

        Parameters
        - argv: Unset (use sys.argv), a shell-like string (split with shlex) or an
          iterable of strings; in every form element 0 is the program name.
        - context: any value, forwarded to the callbacks.

        Returns
        - tuple[ParseResult, ...] on success; None when a fault was handled by
          the fallback. Nothing is dispatched unless scanning and verification
          both succeed.
        """
        if argv is Unset:
            argv = list(sys.argv)
        elif isinstance(argv, str):
            argv = shlex.split(argv)
        elif isinstance(argv, Iterable):
            argv = list(argv)
            if not all(isinstance(token, str) for token in argv):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        self._install()
        if argv:
            self._invoked = argv[0]

        try:
            results = scan(self._registry, argv, end_of_options=self.end_of_options)
            verify(self._registry)
            dispatch(
                results,
                context,
                on_option=self._on_option,
                on_argument=self._on_argument,
                helper=Unset if self.override_help else self._helper,
                versioner=Unset if self.override_version else self._versioner,
            )
        except CommandException as fault:
            return self.trigger(fault)
        return results

    def __invoke__(self, prompt=Unset):
        """
        Execute this application with a token stream (program name excluded).

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        program = self._program if self._program is not Unset else (sys.argv[0] if sys.argv else self.program)
        return self.parse([program, *tokens])

    # --- rendering ---

    def _helper(self):
        self.print_help()
        if self.shell:
            sys.exit(0)

    def _versioner(self):
        self.print_version()
        if self.shell:
            sys.exit(0)

    @property
    def copyright(self):
        """
        Copyright line: "Copyright (C) [year[-current]] authors. [versioning]".
        """
        line = Text("Copyright (C)")
        if self.year is not None:
            current = datetime.date.today().year
            line.append(" %d" % self.year if self.year == current else " %d-%d" % (self.year, current))
        if self.authors:
            line.append(" " + ", ".join(self.authors) + ".")
        if self.versioning:
            line.append(" " + self.versioning)
        return line.plain

    def print_help(self):
        """
        Render help to stdout.

        Palette keys
        - usage-label, program-name, usage-section, description-section
        - group-label, option-name, metavar, argument-description, constraint
        - panel-title, panel-subtitle

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        self._install()
        console = Console(highlight=False)
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",
            "group-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "metavar": "bold #FFD600",
            "argument-description": "#9CA3AF",
            "constraint": "italic #F97316",
            "panel-title": "bold #FF4D94",
            "panel-subtitle": "#9CA3AF",
        } | getattr(__import__('__main__'), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        renders = []
        width = console.width - 4 * self.fancy

        # Usage lines: one per synopsis, continued with "or:".
        usage = Text()
        for index, synopsis in enumerate(self.synopses or ["[OPTION]..."]):
            if index:
                usage.append("\n").append("   or", styler("usage-label")).append(": ")
            else:
                usage.append("usage", styler("usage-label")).append(": ")
            usage.append(text(self.program, styler("program-name")))
            usage.append(" ").append(text(synopsis, styler("usage-section")))
        renders.append(usage.append("\n"))

        if self.descr:
            renders.append(text(self.descr, styler("description-section")).copy().append("\n"))

        def names(option):
            label = Text("    " if option.short is None else "")
            if option.short is not None:
                label.append(text("-" + option.short, styler("option-name"))).append(", ")
            label.append(text("--" + option.name, styler("option-name")))
            if option.takes_argument:
                metavar = text(option.metavar or "<%s>" % option.name, styler("metavar"))
                label.append(" ").append(Text.assemble("[", metavar, "]") if option.optional else metavar)
            return label

        if options := self.options:
            padding = 2
            labels = [names(option) for option in options]
            indent = min(max(map(len, labels)) + padding * 2, 30)

            section = Text()
            section.append(text("options", styler("group-label"))).append(":").append("\n")
            for option, label in zip(options, labels):
                line = Text(" " * padding).append(label)

                descr = Text()
                if option.descr:
                    descr.append(text(option.descr, styler("argument-description")))
                if phrase := describe(option):
                    descr.append(" " if descr else "").append(text("(%s)" % phrase, styler("constraint")))

                if descr:
                    if len(line) + 1 > indent:
                        line.append("\n").append(" " * indent)
                    else:
                        line.append(" " * (indent - len(line)))
                    wrapped = descr.wrap(console, max(width - indent, 10))
                    line.append(wrapped[0])
                    for segment in list(wrapped)[1:]:
                        line.append("\n").append(" " * indent).append(segment)
                section.append(line).append("\n")
            renders.append(section)

        renders[-1].rstrip()
        renderable = Group(*renders)

        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.program} HELP".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
                subtitle=text(self.copyright, styler("panel-subtitle")),
            )

        console.print(renderable)

    def print_version(self):
        """
        Render version information to stdout:

            <program> <major>.<minor>.<patch>
            Copyright (C) <year>[-<current year>] <authors>. <versioning>
        """
        console = Console(highlight=False)
        styles = defaultdict(str, {
            "program-name": "bold #FF4D94",
            "program-version": "bold #00E6FF",
            "copyright-section": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__('__main__'), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        header = Text(" ").join((
            text(self.program, styler("program-name")),
            text("%d.%d.%d" % self.version, styler("program-version")),
        ))
        renderable = Group(header, text(self.copyright, styler("copyright-section")))

        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.program} VERSION".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )

        console.print(renderable)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for applications.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt:
      • Unset: read sys.argv[1:].
      • str: split with shlex.split.
      • Iterable[str]: use items as tokens (each must be str).

    Returns
    - Whatever __invoke__ returns (the parse results for an App).
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "App",
    "invoke",
)
