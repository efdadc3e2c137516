import re
from typing import List

OPERATORS = '+>^()'

_COMMENT = re.compile(r'<!--[\s\S]*?-->')


def strip_comments(text: str) -> str:
    """Removes `<!-- ... -->` comments in a single pass."""
    return _COMMENT.sub('', text)


class _Depth:
    """
    Nesting state of the scanner.

    Braces hold literal text, brackets hold attributes. Whichever kind is opened
    first owns the region: `[` inside `{...}` and `{` inside `[...]` are plain text.
    """

    __slots__ = ('braces', 'brackets')

    def __init__(self):
        self.braces = 0
        self.brackets = 0

    @property
    def top(self) -> bool:
        return not self.braces and not self.brackets

    def open_brace(self):
        if not self.brackets:
            self.braces += 1

    def close_brace(self):
        if self.braces:
            self.braces -= 1

    def open_bracket(self):
        if not self.braces:
            self.brackets += 1

    def close_bracket(self):
        if self.brackets:
            self.brackets -= 1


def tokenize(text: str) -> List[str]:
    """
    Splits an abbreviation into operator tokens (`+ > ^ ( )`) and literal segments.

    Operators count only outside `{...}` and `[...]`. A `*N` repeat marker becomes a
    segment of its own. Closing a text block with `}` is followed by an implicit `+`
    unless a repeat marker comes next.
    """
    tokens: List[str] = []
    buffer = ''
    depth = _Depth()

    for i, c in enumerate(text):
        if c == '{':
            depth.open_brace()
        elif c == '[':
            depth.open_bracket()
        elif c in OPERATORS:
            if depth.top:
                if buffer:
                    tokens.append(buffer)
                    buffer = ''
                tokens.append(c)
                c = ''
        elif c == '*':
            if buffer and depth.top:
                tokens.append(buffer)
                buffer = ''
        elif c == '}':
            depth.close_brace()
            if depth.top:
                tokens.append(buffer + c)
                c = buffer = ''
        elif c == ']':
            depth.close_bracket()

        if depth.top and c != '*' and i and text[i - 1] == '}':
            tokens.append('+')
        buffer += c

    if buffer:
        tokens.append(buffer)
    return tokens
