"""
Argsmith faults: codes and records for parse-time problems.

Scope
- FaultCode: canonical, stable numeric identifiers for everything the parser
  reports to the user. Codes are grouped by domain to keep logs searchable.
- Fault: one reported problem (code + verbatim message). Faults accumulate in
  the diagnostics sink; they are never raised, the host program decides whether
  to abort by checking Parser.has_errors().

API misuse (bad names, conflicting declarations, unsupported conversion targets)
is not a fault: it raises TypeError/ValueError at the call site.
"""
from collections import defaultdict
from enum import IntEnum
from typing import NamedTuple

from rich.text import Text


def _styles():
    return defaultdict(str, {
        "error": "bold red",
    } | getattr(__import__("__main__"), "__styles__", {}))


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - declarations (2110x)
      • MISSING_REQUIRED_OPTION
    - routing (2112x)
      • UNKNOWN_COMMAND, UNMATCHED_COMMAND, UNDECLARED_COMMANDS
    - values (2113x)
      • UNCONVERTIBLE_VALUE
    - host (2119x)
      • REPORTED_ERROR: anything the host program passes to report_error()
    """
    # --- declaration errors ---
    MISSING_REQUIRED_OPTION = 21101

    # --- routing errors ---
    UNKNOWN_COMMAND         = 21121
    UNMATCHED_COMMAND       = 21122
    UNDECLARED_COMMANDS     = 21123

    # --- value errors ---
    UNCONVERTIBLE_VALUE     = 21131

    # --- host errors ---
    REPORTED_ERROR          = 21191


class Fault(NamedTuple):
    code: FaultCode
    message: str

    def __str__(self):
        return self.message

    def __rich__(self):
        """
        styled rendering for rich consoles; the "error" style can be overridden
        through a __styles__ mapping in __main__.
        """
        return Text(self.message, style=_styles()["error"])


__all__ = (
    "FaultCode",
    "Fault",
)
