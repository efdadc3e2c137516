import pytest

from emmetpy.cache import FileCache
from emmetpy.config import compiler_from_config, load_config, parse_config, tables_from_config
from emmetpy.errors import ConfigError
from emmetpy.tables import AbbreviationTables


def test_defaults():
    cfg = parse_config('')
    assert cfg['indented'] is True
    assert cfg['write'] == [] and cfg['cache'] is None

def test_bad_documents(tmp_path):
    with pytest.raises(ConfigError):
        parse_config('- a\n- b\n')
    with pytest.raises(ConfigError):
        parse_config('tags: [unclosed')
    with pytest.raises(ConfigError):
        tables_from_config(parse_config('tags: [1, 2]'))
    with pytest.raises(ConfigError):
        load_config(tmp_path / 'missing.yaml')

def test_compiler_from_config(tmp_path):
    path = tmp_path / 'emmet.yaml'
    path.write_text("indented: false\n"
                    "tags: {bq: blockquote}\n"
                    "attributes: {h: href}\n"
                    "implicit: {ul: li}\n")
    em = compiler_from_config(load_config(path))
    assert em.cache is None
    assert em.expand('ul>.x') == '<ul><li class="x"></li></ul>'
    assert em.expand('bq>a[h=#]') == '<blockquote><a href="#"></a></blockquote>'

def test_cache_config(tmp_path):
    em = compiler_from_config(parse_config(f"cache: {tmp_path}\n"))
    assert isinstance(em.cache, FileCache)
    em = compiler_from_config(parse_config(f"cache: {{dir: {tmp_path}, dir_level: 2}}\n"))
    assert em.cache.dir_level == 2
    with pytest.raises(ConfigError, match='not writable'):
        compiler_from_config(parse_config(f"cache: {{dir: {tmp_path / 'nope'}}}\n"))
    with pytest.raises(ConfigError):
        compiler_from_config(parse_config("cache: {dir_level: 2}\n"))

def test_tables_are_read_only():
    tables = AbbreviationTables(tags={'bq': 'blockquote'}, implicit={'ul': 'li'})
    with pytest.raises(TypeError):
        tables.tags['x'] = 'y'
    with pytest.raises(AttributeError):
        tables.tags = {}
    source = {'a': 'b'}
    tables = AbbreviationTables(tags=source)
    source['a'] = 'c'
    assert tables.tags['a'] == 'b'
