from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .errors import ConfigError


def _freeze(name: str, table: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if table is None:
        return MappingProxyType({})
    if not isinstance(table, Mapping):
        raise ConfigError(f"Abbreviation table '{name}' must be a mapping, got {type(table).__name__}.")
    frozen: Dict[str, str] = {}
    for key, value in table.items():
        # YAML turns `no:` or `1:` into non-strings; tables are text only
        frozen[str(key)] = '' if value is None else str(value)
    return MappingProxyType(frozen)


class AbbreviationTables:
    """
    Read-only lookup tables used while expanding an abbreviation.

    - tags:       tag abbreviations, resolved repeatedly (bq -> blockquote)
    - attributes: attribute-name abbreviations, resolved once (h -> href)
    - extended:   text appended after a tag name for a `tag:suffix` token
    - implicit:   tag to use when a node names none, keyed by the lowercased context tag
    """

    __slots__ = ('tags', 'attributes', 'extended', 'implicit')

    def __init__(self,
                 tags: Optional[Mapping[str, str]] = None,
                 attributes: Optional[Mapping[str, str]] = None,
                 extended: Optional[Mapping[str, str]] = None,
                 implicit: Optional[Mapping[str, str]] = None):
        object.__setattr__(self, 'tags', _freeze('tags', tags))
        object.__setattr__(self, 'attributes', _freeze('attributes', attributes))
        object.__setattr__(self, 'extended', _freeze('extended', extended))
        object.__setattr__(self, 'implicit', _freeze('implicit', implicit))

    def __setattr__(self, name, value):
        raise AttributeError("AbbreviationTables is immutable")

    def __delattr__(self, name):
        raise AttributeError("AbbreviationTables is immutable")

    def __repr__(self):
        return (f"AbbreviationTables(tags={len(self.tags)}, attributes={len(self.attributes)}, "
                f"extended={len(self.extended)}, implicit={len(self.implicit)})")


EMPTY_TABLES = AbbreviationTables()
