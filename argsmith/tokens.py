"""
argsmith.tokens
~~~~~~~~~~~~~~~

Owned view over the argument vector with per-token consumption markers.

What this module provides
- Token: one element of the argument vector (text, original index, consumed marker).
- TokenStore: the sequence of tokens for one parser, with the matching and
  remainder bookkeeping every declaration relies on.

Rules
- Index 0 is the program identity: never matched, always kept in the remainder.
- Scanning is always in original order; the first unconsumed match wins.
- The first literal separator ("--" by default) bounds every scan. It is consumed
  the first time the store is scanned and never shows up in the remainder; tokens
  after it are positional for good.
- Consuming an option also consumes the next unconsumed token as its value. The
  value token is taken as-is, it is never matched against any name.
"""
import logging

from .utils import Unset

logger = logging.getLogger(__name__)


class Token:
    __slots__ = ("text", "index", "consumed")

    def __init__(self, text, index, /):
        if not isinstance(text, str):
            raise TypeError("token text must be a string")
        self.text = text
        self.index = index
        self.consumed = False

    def __repr__(self):
        return "Token(%r, %d%s)" % (self.text, self.index, ", consumed" if self.consumed else "")


class TokenStore:
    """
    Mutable view of the argument vector shared by a parser and its command scopes.

    The store never removes tokens; consumption only flips markers, so the
    remainder can be produced any number of times and always reflects the
    current state.
    """

    def __init__(self, argv, /, separator="--"):
        if isinstance(argv, str):
            raise TypeError("argument vector must be a sequence of strings, not a string")
        self._tokens = [Token(text, index) for index, text in enumerate(argv)]
        self._separator = separator
        self._boundary = Unset

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __getitem__(self, index):
        return self._tokens[index]

    @property
    def boundary(self):
        """
        Index of the separator token, or the length of the store when absent.

        Locating the separator consumes it; this happens once per store.
        """
        if self._boundary is Unset:
            self._boundary = len(self._tokens)
            for token in self._tokens[1:]:
                if token.text == self._separator:
                    token.consumed = True
                    self._boundary = token.index
                    logger.debug("separator %r found at index %d", self._separator, token.index)
                    break
        return self._boundary

    def candidates(self):
        """
        Yield the unconsumed tokens eligible for matching, in original order.
        """
        for token in self._tokens[1:self.boundary]:
            if not token.consumed:
                yield token

    def _follower(self, token):
        for candidate in self._tokens[token.index + 1:self.boundary]:
            if not candidate.consumed:
                return candidate
        return None

    def consume_matching(self, predicate, /, *, value=False):
        """
        Consume the first candidate token satisfying predicate.

        With value=True the next unconsumed token before the separator is consumed
        too, as the value of the matched token; when there is no such token nothing
        is consumed and None is returned.

        Returns
        - None when nothing matched.
        - (token, None) for presence-only matches.
        - (token, value_token) when value=True.
        """
        for token in self.candidates():
            if not predicate(token.text):
                continue
            if not value:
                token.consumed = True
                return token, None
            if (follower := self._follower(token)) is None:
                logger.debug("token %r at index %d has no value to take", token.text, token.index)
                return None
            token.consumed = follower.consumed = True
            return token, follower
        return None

    def find(self, predicate, /):
        """
        Return the first candidate token satisfying predicate without consuming it.
        """
        for token in self.candidates():
            if predicate(token.text):
                return token
        return None

    def remaining(self):
        """
        Return the program identity followed by the unconsumed tokens, in order.

        Only reports state; apart from the one-time separator consumption it does
        not consume anything.
        """
        self.boundary  # NOQA: locates and consumes the separator
        return [token.text for token in self._tokens[:1]] + [
            token.text for token in self._tokens[1:] if not token.consumed
        ]


__all__ = (
    "Token",
    "TokenStore",
)
