"""Search pattern compilation.

Turns a path glob such as ``logs/2024/*.json`` into a literal prefix used to
narrow the remote enumeration, plus a matcher applied to every key the
enumeration returns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from bucketstore.domain.paths import normalize_path

WILDCARD = "*"
# A wildcard never crosses a path separator
_WILDCARD_REGEX = "[^/]*?"


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class Wildcard:
    pass


Token = Union[Literal, Wildcard]


def parse_glob(pattern: str) -> tuple[Token, ...]:
    """Split a glob into literal runs and wildcards.

    Consecutive ``*`` characters collapse into one wildcard.
    """
    tokens: list[Token] = []
    literal: list[str] = []
    for char in pattern:
        if char != WILDCARD:
            literal.append(char)
            continue
        if literal:
            tokens.append(Literal("".join(literal)))
            literal = []
        if not tokens or not isinstance(tokens[-1], Wildcard):
            tokens.append(Wildcard())
    if literal:
        tokens.append(Literal("".join(literal)))
    return tuple(tokens)


@dataclass(frozen=True, slots=True)
class GlobPattern:
    """A parsed glob with its compiled, fully anchored regular expression."""

    tokens: tuple[Token, ...]
    regex: re.Pattern[str] = field(compare=False)

    @classmethod
    def compile(cls, pattern: str) -> "GlobPattern":
        tokens = parse_glob(pattern)
        body = "".join(
            _WILDCARD_REGEX if isinstance(token, Wildcard) else re.escape(token.text)
            for token in tokens
        )
        return cls(tokens=tokens, regex=re.compile(f"^{body}$", re.DOTALL))

    def matches(self, key: str) -> bool:
        return self.regex.match(key) is not None


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    prefix: str
    pattern: GlobPattern | None = None

    def matches(self, key: str) -> bool:
        if self.pattern is None:
            return True
        return self.pattern.matches(key)


def _literal_prefix(pattern: str) -> str:
    wildcard_pos = pattern.index(WILDCARD)
    slash_pos = pattern.rfind("/", 0, wildcard_pos)
    return pattern[:slash_pos] if slash_pos >= 0 else ""


def get_search_criteria(search_pattern: str | None) -> SearchCriteria:
    """Compile a search pattern into a prefix and an optional matcher.

    Without a wildcard the normalized pattern is used as the prefix as-is and
    no matcher is produced.

    A wildcard never matches "/": "x/*" selects the direct children of "x"
    only, not "x/nested/file". Use the bare prefix "x/" to select a whole
    folder recursively.
    """
    if not search_pattern:
        return SearchCriteria(prefix="")

    normalized = normalize_path(search_pattern)
    if WILDCARD not in normalized:
        return SearchCriteria(prefix=normalized)

    return SearchCriteria(
        prefix=_literal_prefix(normalized),
        pattern=GlobPattern.compile(normalized),
    )
