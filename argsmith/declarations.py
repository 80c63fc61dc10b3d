r"""
Argsmith declarations: flags, options, commands and the registry that owns them.

Overview
- Declarations
  • Flag: named, presence-only switch (e.g., -f / -force).
  • Option: named switch taking the next token as its value (e.g., -i in.txt).
  • Command: named sub-mode with a handler; the handler runs in its own nested
    declaration scope over the same token store.

- Registry
  • One per scope (the parser's root scope, plus one per running command).
  • Keyed by canonical name; names and aliases share one namespace per scope.
  • Builder calls are idempotent by name: declaring "force" twice returns the
    same Flag, and builder chains on it only augment it.

Resolution
- A flag or option resolves once, on its first value query (get_value(),
  get_value_as(), bool() or help-trigger evaluation), so that the builder chain
  (aliases in particular) is complete before tokens are scanned. The outcome is
  cached: later queries never rescan and never consume more tokens.
- Matching is exact and case-sensitive: a token matches when it equals one of
  the parser prefixes followed by the canonical name or an alias.

Quick example:
    >>> force = parser.flag("force").alias("f").description("Force").get_value()
    >>> source = parser.option("input").alias("i").required().get_value()
    >>> parser.command("do").alias("make").execute(lambda parser: 0)
"""
import logging

from . import conversions
from .faults import FaultCode
from .utils import Unset, mirror

logger = logging.getLogger(__name__)


def _sanitize_name(name, /):
    if not isinstance(name, str):
        raise TypeError("declaration names must be strings")
    elif not name:
        raise ValueError("declaration names cannot be empty-strings")
    return name


class Declaration:
    """
    Common part of every declaration: canonical name, aliases and description.

    Aliases keep their declaration order; adding an alias that is already known
    to this declaration is a no-op, adding one owned by another declaration of the
    same scope raises ValueError.
    """
    __typename__ = "declaration"
    __displayable__ = ("name", "aliases", "descr")

    name = mirror("name")
    aliases = mirror("aliases")
    descr = mirror("descr")

    def __init__(self, registry, name, /):
        self._registry = registry
        self._name = name
        self._aliases = []
        self._descr = None

    @property
    def names(self):
        """
        Canonical name first, then aliases in declaration order.
        """
        if self._name is None:
            return tuple(self._aliases)
        return (self._name, *self._aliases)

    def alias(self, *aliases):
        for alias in aliases:
            if _sanitize_name(alias) in self.names:
                continue
            self._registry.claim(self, alias)
            self._aliases.append(alias)
        return self

    def description(self, text, /):
        if not isinstance(text, str):
            raise TypeError(f"{self.__typename__} description must be a string")
        self._descr = text
        return self

    def __rich_repr__(self):
        for name in type(self).__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "%s(%s)" % (self.__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


class Switch(Declaration):
    __displayable__ = Declaration.__displayable__ + ("resolved",)

    def __init__(self, registry, name, /):
        super().__init__(registry, name)
        self._value = Unset

    @property
    def resolved(self):
        return self._value is not Unset

    def spellings(self):
        """
        Every token text that matches this declaration, in precedence order.
        """
        return tuple(prefix + name for name in self.names for prefix in self._registry.parser.prefixes)

    def _consume(self, *, value=False):
        spellings = frozenset(self.spellings())
        return self._registry.parser.tokens.consume_matching(spellings.__contains__, value=value)


class Flag(Switch):
    __typename__ = "flag"

    def get_value(self):
        if self._value is Unset:
            self._value = self._consume() is not None
            logger.debug("flag %r resolved to %r", self._name, self._value)
        return self._value

    def __bool__(self):
        return self.get_value()


class Option(Switch):
    """
    Value-bearing switch.

    - Matched at most once: later occurrences of the same spelling stay
      unconsumed and surface in the remainder.
    - Without a match the value is the default (None when no default was given).
    - required() with no match and no default reports a missing-option fault at
      resolution time.
    """
    __typename__ = "option"
    __displayable__ = Switch.__displayable__ + ("mandatory", "default")

    mandatory = mirror("required")
    default = mirror("default")

    def __init__(self, registry, name, /):
        super().__init__(registry, name)
        self._required = False
        self._default = None
        self._conversions = {}

    def required(self, required=True, /):
        self._required = bool(required)
        return self

    def default_value(self, value, /):
        if not isinstance(value, str | None):
            raise TypeError("option default value must be a string")
        self._default = value
        return self

    def get_value(self):
        if self._value is not Unset:
            return self._value

        if (match := self._consume(value=True)) is not None:
            self._value = match[1].text
        else:
            self._value = self._default

        if self._value is None and self._required:
            self._registry.parser.report(
                FaultCode.MISSING_REQUIRED_OPTION,
                "missing required option %r" % self._name
            )

        logger.debug("option %r resolved to %r", self._name, self._value)
        return self._value

    def get_value_as(self, type, /):
        """
        Convert the resolved value (or default) to type.

        Returns the empty-equivalent of type (0, 0.0, False, "") when the option is
        absent, or when the text does not convert; in the latter case a conversion
        fault is reported once.
        """
        if not conversions.supported(type):
            raise TypeError("unsupported conversion target %r" % (type,))

        try:
            return self._conversions[type]
        except KeyError:
            pass

        if (text := self.get_value()) is None:
            value = conversions.zero(type)
        elif not (outcome := conversions.convert(text, type)):
            self._registry.parser.report(
                FaultCode.UNCONVERTIBLE_VALUE,
                "cannot convert %r to %s for option %r" % (text, type.__name__, self._name)
            )
            value = outcome.value
        else:
            value = outcome.value

        self._conversions[type] = value
        return value


class Command(Declaration):
    """
    Named sub-mode. The default command has no canonical name; it is matched by
    its aliases, or selected when no command token is present.
    """
    __typename__ = "command"
    __displayable__ = Declaration.__displayable__ + ("fallback",)

    fallback = mirror("fallback")

    def __init__(self, registry, name, /, *, fallback=False):
        super().__init__(registry, name)
        self._fallback = fallback
        self._handler = None

    @property
    def handler(self):
        return self._handler

    def execute(self, handler, /):
        if not callable(handler):
            raise TypeError("command handler must be callable")
        self._handler = handler
        return self


class Registry:
    """
    Declarations of one scope.

    The root registry belongs to the parser; each running command gets a child
    registry (depth + 1) that shares the parser and its token store.
    """

    def __init__(self, parser, /, parent=None):
        self.parser = parser
        self.parent = parent
        self.depth = 0 if parent is None else parent.depth + 1
        self.dispatch = Unset
        self._declarations = {}
        self._owners = {}
        self._fallback = None

    def __contains__(self, name):
        return name in self._declarations

    def __getitem__(self, name):
        return self._declarations[name]

    def __iter__(self):
        return iter(self._declarations.values())

    def available(self, name, declaration=None, /):
        """
        Whether name is unclaimed in this scope (or already owned by declaration).
        """
        return self._owners.get(name, declaration) is declaration

    def claim(self, declaration, name, /):
        if (owner := self._owners.setdefault(name, declaration)) is not declaration:
            raise ValueError(f"name {name!r} is already in use by {owner!r}")

    def declare(self, kind, name, /):
        if (existing := self._declarations.get(_sanitize_name(name))) is not None:
            if type(existing) is not kind:
                raise TypeError(f"{name!r} is already declared as a {existing.__typename__}")
            return existing

        declaration = kind(self, name)
        self.claim(declaration, name)
        self._declarations[name] = declaration
        return declaration

    def fallback(self):
        if self._fallback is None:
            self._fallback = Command(self, None, fallback=True)
        return self._fallback

    def commands(self):
        """
        Declared commands in declaration order, the default command last.
        """
        commands = [declaration for declaration in self if isinstance(declaration, Command)]
        if self._fallback is not None:
            commands.append(self._fallback)
        return commands


__all__ = (
    "Declaration",
    "Flag",
    "Option",
    "Command",
    "Registry",
)
