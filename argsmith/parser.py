"""
Argsmith parser facade: declare, resolve, dispatch, report.

What this module provides
- Parser: the only object host programs touch. It owns the token store, the
  declaration scopes and the diagnostics channels of one run.
- Dispatch: (executed, result) outcome of Parser.execute_command().

Lifecycle
- Construct from the argument vector (index 0 is the program identity) and the
  error/help streams, preferably as a context manager:

    with Parser(sys.argv, sys.stderr, sys.stdout) as parser:
        force = parser.flag("force").alias("f").get_value()
        ...

  Leaving the block finalizes the parser: pending help and errors are rendered,
  once, whatever the exit path. finalize() does the same explicitly.
- Declarations resolve lazily and once (see argsmith.declarations).
- execute_command() selects at most one command of the current scope and runs
  its handler with the parser; inside the handler, declarations land in a nested
  scope over the same token store.

Dispatch states
- no command declared      → fault, Dispatch(False, None)
- command token found      → token consumed, handler run, Dispatch(True, result)
- default command declared → handler run, nothing consumed, Dispatch(True, result)
- nothing matched          → fault, Dispatch(False, None); the stray token stays
                             in the remainder
Dispatch is cached per scope: calling it again returns the first outcome.

Faults never abort: check has_errors() after the phases that matter.
"""
import logging
import sys
from collections.abc import MutableSequence
from typing import NamedTuple

from .declarations import Flag, Option, Command, Registry
from .diagnostics import Diagnostics
from .faults import FaultCode
from .tokens import TokenStore
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class Dispatch(NamedTuple):
    executed: bool
    result: object


def _sanitize_strings(cls, field, values, /):
    values = tuple(values)
    if not values:
        raise ValueError(f"{cls.__name__} {field!r} must contain at least one string")
    for value in values:
        if not isinstance(value, str):
            raise TypeError(f"{cls.__name__} {field!r} must contain strings only")
        elif not value:
            raise ValueError(f"{cls.__name__} {field!r} cannot contain empty-strings")
    return values


class Parser:
    """
    Declarative command-line parser over one argument vector.

    Parameters
    - argv: sequence of strings; defaults to sys.argv.
    - stderr: error stream (file object or rich Console); defaults to sys.stderr
      at render time.
    - stdout: help stream (file object or rich Console); defaults to sys.stdout
      at render time.
    - prefixes: markers placed before flag/option names, default ("-", "--").
    - separator: token after which everything is positional, default "--".
    - helpers: implicit help flag name and aliases, default ("help", "h").
    """

    def __init__(self, argv=Unset, stderr=Unset, stdout=Unset, /, *, prefixes=Unset, separator=Unset, helpers=Unset):
        self._prefixes = _sanitize_strings(type(self), "prefixes", coalesce(prefixes, ("-", "--")))
        self._helpers = _sanitize_strings(type(self), "helpers", coalesce(helpers, ("help", "h")))
        separator, = _sanitize_strings(type(self), "separator", (coalesce(separator, "--"),))

        self._tokens = TokenStore(coalesce(argv, sys.argv), separator=separator)
        self._diagnostics = Diagnostics(stderr, stdout)
        self._root = self._scope = Registry(self)
        self._scopes = [self._root]
        self._finalized = False

    @property
    def prefixes(self):
        return self._prefixes

    @property
    def tokens(self):
        return self._tokens

    @property
    def scope(self):
        return self._scope

    @property
    def errors(self):
        return self._diagnostics.faults

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.finalize()

    # --- declarations ---

    def flag(self, name, /):
        return self._scope.declare(Flag, name)

    def option(self, name, /):
        return self._scope.declare(Option, name)

    def command(self, name, /):
        return self._scope.declare(Command, name)

    def default_command(self):
        return self._scope.fallback()

    def default_help_flag(self):
        """
        Return the implicit help flag (declared in the root scope on first use).

        Help aliases already owned by another root declaration are left to it:
        with flag("host").alias("h") declared first, the help flag is only
        spelled -help/--help.
        """
        name, *aliases = self._helpers
        trigger = self._root.declare(Flag, name)
        return trigger.alias(*(alias for alias in aliases if self._root.available(alias, trigger)))

    # --- dispatch ---

    def execute_command(self):
        scope = self._scope
        if scope.dispatch is Unset:
            scope.dispatch = self._dispatch(scope)
        return scope.dispatch

    def _dispatch(self, scope):
        if not (commands := scope.commands()):
            self.report(FaultCode.UNDECLARED_COMMANDS, "no command declared")
            return Dispatch(False, None)

        spellings = {name: command for command in commands for name in command.names}
        if (token := self._tokens.find(spellings.__contains__)) is not None:
            token.consumed = True
            logger.debug("command token %r matched at index %d", token.text, token.index)
            return Dispatch(True, self._run(spellings[token.text]))

        if (fallback := commands[-1]).fallback:
            logger.debug("no command token, running the default command")
            return Dispatch(True, self._run(fallback))

        if (token := self._tokens.find(lambda text: not text.startswith(self._prefixes))) is not None:
            self.report(FaultCode.UNKNOWN_COMMAND, "unknown command %r" % token.text)
        else:
            self.report(FaultCode.UNMATCHED_COMMAND, "no command matched")
        return Dispatch(False, None)

    def _run(self, command):
        if command.handler is None:
            raise TypeError(f"{command!r} has no handler")
        parent, self._scope = self._scope, Registry(self, parent=self._scope)
        self._scopes.append(self._scope)
        try:
            return command.handler(self)
        finally:
            self._scope = parent

    # --- remainder ---

    def remaining(self):
        return self._tokens.remaining()

    def extract_remaining(self, argv, /):
        """
        Rewrite argv in place with the remaining arguments and return it.
        """
        if not isinstance(argv, MutableSequence):
            raise TypeError("extract_remaining() argument must be a mutable sequence")
        argv[:] = self.remaining()
        return argv

    # --- diagnostics ---

    def report(self, code, message, /):
        self._diagnostics.report(code, message)

    def report_error(self, format, /, *args):
        """
        Report a printf-style message: format is always %-formatted with args,
        so a literal percent sign is spelled %%.
        """
        if not isinstance(format, str):
            raise TypeError("report_error() first argument must be a string")
        self.report(FaultCode.REPORTED_ERROR, format % args)

    def has_errors(self):
        return self._diagnostics.has_errors()

    def help(self, trigger=Unset, /):
        """
        Return the help sink bound to trigger (the implicit help flag when omitted).

        Content is rendered only when its trigger is true. Registering any explicit
        trigger makes the implicit one inert.
        """
        if trigger is Unset:
            return self._diagnostics.help(self.default_help_flag(), explicit=False, depth=self._scope.depth)
        if not isinstance(trigger, Flag):
            raise TypeError("help() argument must be a flag")
        return self._diagnostics.help(trigger, explicit=True, depth=self._scope.depth)

    def show_help(self, stream=Unset, /):
        self._diagnostics.show_help(stream)

    def show_errors(self, stream=Unset, /):
        self._diagnostics.show_errors(stream)

    def finalize(self):
        """
        Resolve required options nobody queried, then render help and errors once.
        """
        if self._finalized:
            return
        self._finalized = True
        for scope in self._scopes:
            for declaration in scope:
                if isinstance(declaration, Option) and declaration.mandatory and not declaration.resolved:
                    declaration.get_value()
        self._diagnostics.finalize()


__all__ = (
    "Dispatch",
    "Parser",
)
