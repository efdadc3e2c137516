import re
from typing import List, Mapping

# {content} | [attributes] | .class / #id / tag
_PARTS = re.compile(r'(\{.+\})|(\[.+\])|([.#]?[\w:=!$@\-]+)')

# name=value inside [...]; the value may be bare, "double" or 'single' quoted
_ATTRIBUTE = re.compile(r'''([^=\s]+)=("[^"]*"|'[^']*'|[^"'\s]*)''')


def quote_value(value: str) -> str:
    """Double-quotes an attribute value, or single-quotes it when it contains `"`."""
    if '"' in value:
        return f"'{value}'"
    return f'"{value}"'


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        return value[1:-1]
    return value


def parse_attributes(text: str, attribute_table: Mapping[str, str]) -> str:
    """
    Rewrites the inside of a `[...]` span.
    Attribute names go through the abbreviation table; values are requoted.
    Anything that is not a `name=value` pair (e.g. a bare `disabled`) is kept as is.
    """
    def replace(match):
        name, value = match.group(1), _unquote(match.group(2))
        return (attribute_table.get(name) or name) + '=' + quote_value(value)

    return _ATTRIBUTE.sub(replace, text)


class Segment:
    """One node of an abbreviation, split into its parts."""

    def __init__(self):
        self.tag: str = ''
        self.classes: List[str] = []
        self.attributes: List[str] = []     # rendered `name="value"` items, in source order
        self.content: str = ''

    @property
    def is_text(self) -> bool:
        """True for a bare `{text}` node, which is emitted without a tag."""
        return bool(self.content) and not (self.tag or self.classes or self.attributes)

    def attribute_text(self) -> str:
        """Attributes as they follow the tag name: class first, each preceded by a space."""
        items = list(self.attributes)
        if self.classes:
            items.insert(0, 'class="' + ' '.join(self.classes) + '"')
        return ''.join(' ' + item for item in items)

    def __repr__(self):
        return f"Segment(tag={self.tag!r}, classes={self.classes!r}, attributes={self.attributes!r}, content={self.content!r})"


def parse_segment(text: str, attribute_table: Mapping[str, str]) -> Segment:
    """Extracts tag, classes, id, attributes and inline text from one literal segment."""
    segment = Segment()
    for match in _PARTS.finditer(text):
        part = match.group(0)
        lead = part[0]
        if lead == '.':
            segment.classes.append(part[1:])
        elif lead == '#':
            segment.attributes.append(f'id="{part[1:]}"')
        elif lead == '[':
            segment.attributes.append(parse_attributes(part[1:-1], attribute_table))
        elif lead == '{':
            segment.content = part[1:-1]
        else:
            segment.tag = part
    return segment
