import logging
import re
import time
from typing import List, Optional, Tuple

from .cache import FileCache
from .normalizer import extract_tabs
from .resolver import AbbreviationResolver, TagResolver
from .segment import parse_segment
from .tables import AbbreviationTables, EMPTY_TABLES
from .tokenizer import strip_comments, tokenize

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset([
    'area', 'base', 'br', 'col', 'embed', 'frame', 'hr', 'img',
    'input', 'link', 'meta', 'param', 'source', 'wbr',
])

# $, $$, $@3, $$@-, $$@-10 ...
_NUMBERING = re.compile(r'(\$+)(?:@(-?)(\d*))?')
_REPEAT_COUNT = re.compile(r'\d*')


def is_void(tag: str) -> bool:
    """Void tags and `!doctype`-like declarations never get a closing fragment."""
    return tag.startswith('!') or tag.lower() in VOID_TAGS


def number_fragment(fragment: str, n: int, times: int) -> str:
    """Substitutes `$` placeholders in a repeated fragment for iteration `n` of `times`."""
    def replace(match):
        descending = match.group(2) == '-'
        offset = int(match.group(3) or 0)
        if not offset:
            offset = times - 1 if descending else 0
        value = str(offset - n if descending else offset + n)
        # pad length is the `$` count minus the value's length, not the `$` count itself
        return value.rjust(len(match.group(1)) - len(value), '0')

    return _NUMBERING.sub(replace, fragment)


class _Expansion:
    """State of a single expansion: emitted fragments, open tags and groups."""

    def __init__(self, tables: AbbreviationTables, resolver: TagResolver):
        self.tables = tables
        self.resolver = resolver
        self.result: List[str] = []
        self.tag_stack: List[str] = []
        self.groups: List[Tuple[int, int]] = []                 # (result length, stack depth) at each `(`
        self.last_group: Optional[Tuple[int, List[str]]] = None  # (start index, fragments) of the last closed group

    def _close_tag(self, emit: bool = True) -> str:
        """Pops the innermost open tag and returns its closing fragment ('' for void tags)."""
        if not self.tag_stack:
            return ''
        tag = self.tag_stack.pop()
        if is_void(tag):
            return ''
        closing = f'</{tag}>'
        if emit:
            self.result.append(closing)
        return closing

    def _last_is_open(self) -> bool:
        # an empty fragment stands for the closing of a repeated void tag
        return bool(self.result) and bool(self.result[-1]) and not self.result[-1].startswith('</')

    def _close_group(self):
        start, depth = self.groups.pop() if self.groups else (0, 0)
        while len(self.tag_stack) > depth:
            self._close_tag()
        fragments = self.result[start:]
        self.last_group = (start, fragments) if fragments else None

    def _repeat(self, token: str):
        digits = _REPEAT_COUNT.match(token, 1).group(0)
        times = int(digits) if digits else 0

        if self.last_group:
            start, template = self.last_group
            del self.result[start:]
            self.last_group = None
        elif self.result:
            # the node's closing fragment belongs to the template, so its tag is closed here
            template = [self.result.pop(), self._close_tag(emit=False)]
        else:
            return

        for n in range(times):
            for fragment in template:
                self.result.append(number_fragment(fragment, n, times))

    def _emit_node(self, token: str):
        self.last_group = None
        segment = parse_segment(token, self.tables.attributes)
        if segment.is_text:
            self.result.append(segment.content)
            return
        tag = self.resolver.resolve(segment.tag, self.tag_stack, self.result)
        self.tag_stack.append(tag.name)
        self.result.append(f'<{tag.name}{tag.extension}{segment.attribute_text()}>{segment.content}')

    def run(self, tokens: List[str]) -> str:
        for token in tokens:
            if token == '^':
                if self._last_is_open():
                    self._close_tag()
                self._close_tag()
            elif token == '>':
                pass    # the next node nests inside the open one
            elif token == '+':
                if self._last_is_open():
                    self._close_tag()
            elif token == '(':
                self.groups.append((len(self.result), len(self.tag_stack)))
            elif token == ')':
                self._close_group()
            elif token[0] == '*':
                self._repeat(token)
            else:
                self._emit_node(token)

        while self.tag_stack:
            self._close_tag()
        return ''.join(self.result)


class EmmetCompiler:
    """
    Emmet Compiler
    Expands abbreviations such as `ul#nav>li.item$*3>a{Link}` into markup.

    Features:
    - Nesting (>), siblings (+), climbing up (^)
    - Groups ( ... ) and repetition *N with $ numbering ($$@-3 etc.)
    - Classes (.), id (#), attributes [name=value], text {content}
    - Tag, attribute and extended-attribute abbreviation tables
    - Implicit tags inferred from the enclosing tag (ul > li, table > tr, ...)
    - Optional indented mode, where indentation expresses nesting
    - Optional file cache for long, slow-to-expand inputs

    Malformed input is never an error: unclosed tags are closed at the end and
    a repeat marker with nothing to repeat produces nothing.
    """

    min_cache_len = 60      # characters; shorter inputs never touch the cache
    min_cache_time = 30.0   # ms; faster expansions are not written back

    def __init__(self,
                 tables: Optional[AbbreviationTables] = None,
                 indented: bool = True,
                 cache: Optional[FileCache] = None,
                 tag_resolver: Optional[TagResolver] = None):
        self.tables = tables if tables is not None else EMPTY_TABLES
        self.indented = indented
        self.cache = cache
        self.tag_resolver = tag_resolver or AbbreviationResolver(self.tables)

    def tokens(self, source: str) -> List[str]:
        """Normalizes `source` (indentation, comments) and tokenizes it."""
        text = extract_tabs(source) if self.indented else source
        return tokenize(strip_comments(text))

    def expand(self, source: str, tag_resolver: Optional[TagResolver] = None) -> str:
        """Expands an abbreviation into markup."""
        # output of a per-call resolver is not what the cache holds
        use_cache = self.cache is not None and tag_resolver is None and len(source) >= self.min_cache_len
        if use_cache:
            cached = self.cache.lookup(source)
            if cached is not None:
                logger.debug("Cache hit for %d characters of input", len(source))
                return cached
        started = time.perf_counter()

        expansion = _Expansion(self.tables, tag_resolver or self.tag_resolver)
        output = expansion.run(self.tokens(source))

        if use_cache:
            elapsed = (time.perf_counter() - started) * 1000
            if elapsed > self.min_cache_time:
                logger.debug("Caching expansion that took %.1f ms", elapsed)
                self.cache.store(source, output)
        return output

    __call__ = expand
