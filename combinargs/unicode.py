"""
Unicode helpers: canonical normalization, grapheme segmentation and the
:py:class:`Compare` type used for every name and affix.
"""
import unicodedata
from dataclasses import dataclass
from typing import List, Optional

import regex

GRAPHEME = regex.compile(r"\X")


def normalize(s: str) -> str:
    """
    Canonical composition (NFC).

    >>> normalize("cafe\\u0301") == "caf\\u00e9"
    True
    """
    return unicodedata.normalize("NFC", s)


def graphemes(s: str) -> List[str]:
    """
    Split ``s`` into user-perceived characters.

    >>> graphemes("ab")
    ['a', 'b']
    >>> len(graphemes("e\\u0301"))
    1
    """
    return GRAPHEME.findall(s)


def width(s: str) -> int:
    return len(graphemes(s))


@dataclass(frozen=True)
class Compare:
    """
    A string together with the rule used to compare it against user input.
    The stored string is normalized on construction.

    >>> Compare("Verbose", case_sensitive=False).eq("VERBOSE")
    True
    >>> Compare("verbose").eq("Verbose")
    False
    """

    string: str
    case_sensitive: bool = True

    def __post_init__(self):
        object.__setattr__(self, "string", normalize(self.string))

    def __str__(self) -> str:
        return self.string

    def key(self, s: Optional[str] = None) -> str:
        s = self.string if s is None else normalize(s)
        if self.case_sensitive:
            return s
        return normalize(s.casefold())

    def eq(self, s: str) -> bool:
        return self.key(s) == self.key()

    def strip_prefix(self, s: str) -> Optional[str]:
        """
        Return the remainder of ``s`` after this string, or ``None`` if ``s``
        does not start with it. Boundaries are grapheme boundaries of ``s``
        and the remainder is returned as given.

        >>> Compare("--").strip_prefix("--name=x")
        'name=x'
        >>> Compare("no", case_sensitive=False).strip_prefix("NO-x")
        '-x'
        >>> Compare("--").strip_prefix("-x") is None
        True
        """
        if not self.string:
            return s
        target = self.key()
        clusters = graphemes(s)
        acc = ""
        for i, cluster in enumerate(clusters):
            acc += cluster
            key = self.key(acc)
            if key == target:
                return "".join(clusters[i + 1 :])
            if not target.startswith(key):
                return None
        return None

    def conflicts(self, other: "Compare") -> bool:
        """
        Two names conflict if either comparison rule considers them equal.
        """
        return self.eq(other.string) or other.eq(self.string)
