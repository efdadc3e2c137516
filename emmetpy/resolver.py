import re
from typing import NamedTuple, Optional, Sequence

from .tables import AbbreviationTables, EMPTY_TABLES

DEFAULT_TAG = 'div'

# `<tag attr="...">text` -> everything from the first whitespace or `>` after the name
_AFTER_NAME = re.compile(r'[\s>][\s\S]*')


class ResolvedTag(NamedTuple):
    name: str           # pushed onto the open-tag stack, used for the closing fragment
    extension: str = '' # written right after the name in the opening fragment


class TagResolver:
    """
    Strategy turning the raw tag token of a node into a tag name.

    `open_tags` is the stack of currently open tags (innermost last) and `result`
    the fragments emitted so far; both are read-only for the resolver.
    """

    def resolve(self, token: str, open_tags: Sequence[str], result: Sequence[str]) -> ResolvedTag:
        raise NotImplementedError


class AbbreviationResolver(TagResolver):
    """Resolves tag tokens through a set of AbbreviationTables."""

    def __init__(self, tables: Optional[AbbreviationTables] = None):
        self.tables = tables if tables is not None else EMPTY_TABLES

    def resolve(self, token: str, open_tags: Sequence[str], result: Sequence[str]) -> ResolvedTag:
        base, _, suffix = token.partition(':')
        name = self.expand_name(base) if base else ''
        if not name:
            name = self.implicit_name(open_tags, result)
        extension = self.tables.extended.get(suffix, '') if suffix else ''
        return ResolvedTag(name, extension)

    def expand_name(self, name: str) -> str:
        """
        Follows tag abbreviations until a name maps to nothing new.
        Stops on a self-mapping or when a name comes around a second time.
        """
        table = self.tables.tags
        seen = set()
        key = name.lower()
        while key not in seen:
            seen.add(key)
            value = table.get(key)
            if not value or value == name:
                break
            name = value
            key = value.lower()
        return name

    def implicit_name(self, open_tags: Sequence[str], result: Sequence[str]) -> str:
        """Infers a tag from the enclosing tag, then from the previous fragment."""
        implicit = self.tables.implicit
        if open_tags:
            parent = open_tags[-1].lower()
            if parent in implicit:
                return implicit[parent]
        if result:
            # known limitation: a quoted attribute value containing `>` is cut short here
            previous = _AFTER_NAME.sub('', result[-1][1:], count=1).lower()
            if previous and previous in implicit:
                return implicit[previous]
        return DEFAULT_TAG
