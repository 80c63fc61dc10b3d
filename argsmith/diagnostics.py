"""
argsmith.diagnostics
~~~~~~~~~~~~~~~~~~~~

Single-shot help and error channels.

What this module provides
- HelpText: appendable sink returned by Parser.help(); holds plain text and rich
  renderables, in append order.
- Diagnostics: the two channels of one parser.
  • errors: faults in report order, rendered verbatim, one per line, no dedup.
  • help: HelpText sinks bound to trigger flags; only the sink of the first true
    trigger (registration order) is rendered. Explicit triggers make the
    implicit ones inert. A trigger registered again inside a command scope
    renders the innermost registration.

Rendering rules
- Each channel renders at most once. finalize() renders whatever has not been
  rendered yet; show_help()/show_errors() render now and disable the automatic
  render of that channel, whatever the outcome.
- Streams are resolved at render time. Plain text goes to ordinary file objects
  untouched (tabs, carriage returns and control characters included), followed
  by a newline when it does not end with one. Rich renderables, rich Console
  streams and interactive error streams go through a rich Console.
- On an interactive error stream, faults render through Fault.__rich__ with the
  "error" style, overridable through a __styles__ mapping in __main__.
"""
import logging
import sys

from rich.console import Console
from rich.text import Text

from .faults import Fault
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


def _console(stream, /):
    if isinstance(stream, Console):
        return stream
    return Console(
        file=stream,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def _interactive(stream, /):
    if isinstance(stream, Console):
        return stream.is_terminal
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def _line(text, /):
    return text if text.endswith("\n") else text + "\n"


class HelpText:
    """
    Appendable help sink bound to one trigger flag.

    - write(text): file-like; returns the number of characters written, so the
      sink works with print(..., file=sink).
    - append(renderable): any rich renderable (Text, Table, Panel, ...); returns
      the sink for chaining.
    """

    def __init__(self, trigger, /, *, explicit, depth):
        self.trigger = trigger
        self.explicit = explicit
        self.depth = depth
        self._fragments = []

    def write(self, text, /):
        if not isinstance(text, str):
            raise TypeError("write() argument must be a string")
        self._fragments.append(text)
        return len(text)

    def append(self, renderable, /):
        self._fragments.append(renderable)
        return self

    def flush(self):
        pass

    def __bool__(self):
        return bool(self._fragments)

    def __str__(self):
        return "".join(fragment for fragment in self._fragments if isinstance(fragment, str))

    def renderables(self):
        """
        Join consecutive text fragments into one string, pass renderables through.
        """
        text = []
        for fragment in self._fragments:
            if isinstance(fragment, str):
                text.append(fragment)
                continue
            if text:
                yield "".join(text)
                text = []
            yield fragment
        if text:
            yield "".join(text)


class Diagnostics:
    def __init__(self, stderr=Unset, stdout=Unset, /):
        self._stderr = stderr
        self._stdout = stdout
        self._faults = []
        self._sinks = []
        self._rendered = {"errors": False, "help": False}

    @property
    def faults(self):
        return tuple(self._faults)

    def report(self, code, message, /):
        self._faults.append(Fault(code, message))
        logger.debug("fault %s reported: %s", code.name, message)

    def has_errors(self):
        return bool(self._faults)

    def help(self, trigger, /, *, explicit, depth):
        """
        Return the sink bound to trigger in the given scope depth, creating it on
        first use.
        """
        for sink in self._sinks:
            if sink.trigger is trigger and sink.depth == depth:
                sink.explicit = sink.explicit or explicit
                return sink
        self._sinks.append(sink := HelpText(trigger, explicit=explicit, depth=depth))
        return sink

    def select(self):
        """
        Return the help sink to render, or None.

        Every candidate trigger is evaluated (and thus resolved), then the first
        true one in registration order wins. When that trigger was registered in
        several scopes, the deepest registration is rendered.
        """
        explicit = any(sink.explicit for sink in self._sinks)
        candidates = [sink for sink in self._sinks if sink.explicit or not explicit]
        states = [(sink, sink.trigger.get_value()) for sink in candidates]
        for sink, state in states:
            if state:
                return max(
                    (other for other in candidates if other.trigger is sink.trigger),
                    key=lambda other: other.depth
                )
        return None

    def show_errors(self, stream=Unset, /):
        self._rendered["errors"] = True
        if not self._faults:
            return
        stream = coalesce(stream, coalesce(self._stderr, sys.stderr))
        if isinstance(stream, Console) or _interactive(stream):
            console = _console(stream)
            for fault in self._faults:
                console.print(fault)
            return
        for fault in self._faults:
            stream.write(fault.message + "\n")
        stream.flush()

    def show_help(self, stream=Unset, /):
        self._rendered["help"] = True
        if (sink := self.select()) is None:
            return
        stream = coalesce(stream, coalesce(self._stdout, sys.stdout))
        console = None
        for renderable in sink.renderables():
            if isinstance(renderable, str) and not isinstance(stream, Console):
                stream.write(_line(renderable))
                continue
            if console is None:
                console = _console(stream)
            console.print(Text(renderable) if isinstance(renderable, str) else renderable)
        if not isinstance(stream, Console):
            stream.flush()

    def finalize(self):
        if not self._rendered["help"]:
            self.show_help()
        if not self._rendered["errors"]:
            self.show_errors()


__all__ = (
    "HelpText",
    "Diagnostics",
)
