from typing import Optional

from .cache import FileCache
from .compiler import EmmetCompiler
from .errors import ConfigError, EmmetError
from .resolver import AbbreviationResolver, ResolvedTag, TagResolver
from .tables import AbbreviationTables


def expand(source: str, tables: Optional[AbbreviationTables] = None, indented: bool = False) -> str:
    """One-off expansion without a cache."""
    return EmmetCompiler(tables=tables, indented=indented).expand(source)
