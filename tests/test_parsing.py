"""
Indentation normalizer, tokenizer, segment parser and tag resolver.
"""

from emmetpy.normalizer import count_tokens, extract_tabs, get_tab_level
from emmetpy.resolver import AbbreviationResolver, ResolvedTag
from emmetpy.segment import parse_attributes, parse_segment
from emmetpy.tables import AbbreviationTables
from emmetpy.tokenizer import strip_comments, tokenize


#####################################################################################################################################################
#####
#####  NORMALIZER
#####

def test_tab_level():
    assert get_tab_level('li', False) == 0
    assert get_tab_level('\t\tli', False) == 2
    assert get_tab_level('    li', False) == 2
    assert get_tab_level('    li', True) == 1
    assert get_tab_level('   li', False) == 1

def test_count_tokens():
    assert count_tokens('div>ul>li', '>') == 2
    assert count_tokens('p{a>b}>span', '>') == 1
    assert count_tokens('a[title="x>y"]>b', '>') == 1
    assert count_tokens("a[title='x^y']^b", '^') == 1

def test_extract_tabs():
    assert extract_tabs("ul\n  li\n  li\np") == 'ul>li+li^p'
    assert extract_tabs("div>ul\n\t\tli\n\tp") == 'div>ul>li^p'
    assert extract_tabs("div\n\tul\n\t\tli\np") == 'div>ul>li^^p'
    assert extract_tabs("ul\n\n  li\n   \np") == 'ul>li^p'      # blank lines are skipped
    assert extract_tabs("  div  ") == 'div'
    assert extract_tabs("") == ''

def test_extract_tabs_wide_units():
    # a third line starting with a single space switches to four-space units
    assert extract_tabs("a\n    b\n c") == 'a>b^c'
    assert extract_tabs("a\n    b\n  c") == 'a>b^c'


#####################################################################################################################################################
#####
#####  TOKENIZER
#####

def test_tokenize_operators():
    assert tokenize('ul>li+li') == ['ul', '>', 'li', '+', 'li']
    assert tokenize('div>p^span') == ['div', '>', 'p', '^', 'span']
    assert tokenize('(a>b)*2') == ['(', 'a', '>', 'b', ')', '*2']
    assert tokenize('li.item$*3') == ['li.item$', '*3']

def test_tokenize_text_and_attributes():
    assert tokenize('p{a>b+c}') == ['p{a>b+c}']
    assert tokenize('a[title=x>y]') == ['a[title=x>y]']
    assert tokenize('p{hi}span') == ['p{hi}', '+', 'span']
    assert tokenize('li{x}*2') == ['li{x}', '*2']
    assert tokenize('p{hi}+a') == ['p{hi}', '+', '+', 'a']

def test_tokenize_cross_nesting():
    # the delimiter opened first owns the region
    assert tokenize('a[title={x]+b') == ['a[title={x]', '+', 'b']
    assert tokenize('p{see [ref>x}+b') == ['p{see [ref>x}', '+', '+', 'b']
    assert tokenize('a}b') == ['a}', '+', 'b']

def test_strip_comments():
    assert strip_comments('div<!-- a\nb -->+p') == 'div+p'
    assert strip_comments('a<!--1-->b<!--2-->c') == 'abc'


#####################################################################################################################################################
#####
#####  SEGMENTS
#####

def test_segment_parts():
    seg = parse_segment('div#main.a.b', {})
    assert seg.tag == 'div'
    assert seg.classes == ['a', 'b']
    assert seg.attributes == ['id="main"']
    assert seg.attribute_text() == ' class="a b" id="main"'
    assert parse_segment('span em', {}).tag == 'em'
    assert parse_segment('a:blank', {}).tag == 'a:blank'
    assert parse_segment('p', {}).attribute_text() == ''

def test_segment_text():
    assert parse_segment('{hello}', {}).is_text
    assert parse_segment('{hello}', {}).content == 'hello'
    assert not parse_segment('p{hello}', {}).is_text
    assert not parse_segment('.x{hello}', {}).is_text

def test_attributes():
    assert parse_attributes('src=x.png', {'src': 'data-src'}) == 'data-src="x.png"'
    assert parse_attributes('title="a b" alt=x', {}) == 'title="a b" alt="x"'
    assert parse_attributes("""title='say "hi"'""", {}) == """title='say "hi"'"""
    assert parse_attributes('disabled type=checkbox', {}) == 'disabled type="checkbox"'
    assert parse_segment('img[src=x.png]', {'src': 'data-src'}).attribute_text() == ' data-src="x.png"'


#####################################################################################################################################################
#####
#####  RESOLVER
#####

def test_expand_name():
    resolver = AbbreviationResolver(AbbreviationTables(tags={'a': 'b', 'b': 'c', 'x': 'x', 'p': 'q', 'q': 'p', 'bq': 'blockquote'}))
    assert resolver.expand_name('a') == 'c'
    assert resolver.expand_name('x') == 'x'
    assert resolver.expand_name('p') == 'p'
    assert resolver.expand_name('BQ') == 'blockquote'
    assert resolver.expand_name('Span') == 'Span'

def test_resolve(tables):
    resolver = AbbreviationResolver(tables)
    assert resolver.resolve('a:blank', [], []) == ResolvedTag('a', ' target="_blank"')
    assert resolver.resolve('a:nope', [], []) == ResolvedTag('a', '')
    assert resolver.resolve('bq', [], []) == ResolvedTag('blockquote', '')

def test_implicit(tables):
    resolver = AbbreviationResolver(tables)
    assert resolver.resolve('', ['ul'], ['<ul>']).name == 'li'
    assert resolver.resolve('', ['UL'], ['<UL>']).name == 'li'
    assert resolver.resolve('', ['p'], ['<p>', '<input type="text">']).name == 'label'
    assert resolver.resolve('', ['p'], ['<p>']).name == 'div'
    assert resolver.resolve('', [], []).name == 'div'
    assert AbbreviationResolver().resolve('', ['ul'], ['<ul>']).name == 'div'
