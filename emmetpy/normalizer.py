import re
from typing import List

# spans whose `>` and `^` characters are text, not nesting: "..", '..', {..}
_QUOTED_OR_BRACED = re.compile(r'(?<!\\)"(?:\\.|[^"\\])*"|(?<!\\)\'(?:\\.|[^\'\\])*\'|(?<!\\)\{(?:\\.|[^}\\])*\}')


def count_tokens(line: str, char: str) -> int:
    """Counts nesting operators in a line, ignoring quoted strings and brace text."""
    return _QUOTED_OR_BRACED.sub('', line).count(char)


def get_tab_level(line: str, wide_tabs: bool) -> int:
    """
    Returns the indentation level of a line.
    Every indent unit (four spaces when `wide_tabs`, else two) counts as one tab.
    """
    line = line.replace('    ' if wide_tabs else '  ', '\t')
    return len(line) - len(line.lstrip('\t'))


def _uses_wide_tabs(lines: List[str]) -> bool:
    # a single leading space on the third line selects four-space units, not two;
    # any other input uses two-space units
    if len(lines) < 3:
        return False
    third = lines[2]
    return third[:1] == ' ' and third[1:2] != ' '


def extract_tabs(text: str) -> str:
    """
    Rewrites indentation-based input into inline abbreviation syntax.

    Each non-empty line is prefixed with `>` when indented deeper than the previous
    level, `+` when at the same level, or one `^` per level climbed. A line may itself
    contain `>` and `^`; those shift the level the next line is compared against.
    """
    lines = text.split('\n')
    wide_tabs = _uses_wide_tabs(lines)
    parts: List[str] = []
    previous = -1

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        level = get_tab_level(raw_line, wide_tabs)
        if previous >= 0:
            if level > previous:
                line = '>' + line
            elif level == previous:
                line = '+' + line
            else:
                line = '^' * (previous - level) + line
        previous = level + count_tokens(raw_line, '>') - count_tokens(raw_line, '^')
        parts.append(line)

    return ''.join(parts)
