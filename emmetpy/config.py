"""
YAML configuration.

    indented: true                  # indentation expresses nesting
    tags:       {bq: blockquote}    # tag abbreviations
    attributes: {h: href}           # attribute-name abbreviations
    extended:   {blank: ' target="_blank"'}
    implicit:   {ul: li, ol: li, table: tr, tr: td}
    cache:      {dir: .cache, dir_level: 1, gc_probability: 10}
    write:                          # used by the watcher
      - {src: page.emmet, dst: page.html}
    watch: ["partials/*.emmet"]
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from .cache import FileCache
from .compiler import EmmetCompiler
from .errors import ConfigError
from .tables import AbbreviationTables

DEFAULTS: Dict[str, Any] = {
    'indented': True,
    'tags': {},
    'attributes': {},
    'extended': {},
    'implicit': {},
    'cache': None,
    'write': [],
    'watch': [],
}

CACHE_OPTIONS = ('dir_level', 'gc_probability', 'file_mode', 'dir_mode', 'extension', 'duration')


def parse_config(text: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML configuration: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    cfg = dict(DEFAULTS)
    cfg.update({k: v for k, v in data.items() if v is not None})
    return cfg


def load_config(path) -> Dict[str, Any]:
    """Reads a YAML config file, filling in defaults for missing keys."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigError(f"Cannot read configuration '{path}': {e}") from e
    return parse_config(text)


def tables_from_config(cfg: Dict[str, Any]) -> AbbreviationTables:
    return AbbreviationTables(tags=cfg.get('tags'),
                              attributes=cfg.get('attributes'),
                              extended=cfg.get('extended'),
                              implicit=cfg.get('implicit'))


def cache_from_config(cfg: Dict[str, Any]):
    options = cfg.get('cache')
    if not options:
        return None
    if isinstance(options, str):
        options = {'dir': options}
    if not isinstance(options, dict) or 'dir' not in options:
        raise ConfigError("The 'cache' option needs a 'dir' entry.")
    kwargs = {k: options[k] for k in CACHE_OPTIONS if k in options}
    return FileCache(options['dir'], **kwargs)


def compiler_from_config(cfg: Dict[str, Any]) -> EmmetCompiler:
    """Builds a compiler from a loaded config. Raises ConfigError for an unusable cache dir."""
    return EmmetCompiler(tables=tables_from_config(cfg),
                         indented=bool(cfg.get('indented', True)),
                         cache=cache_from_config(cfg))
