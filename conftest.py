import pytest

from emmetpy.compiler import EmmetCompiler
from emmetpy.tables import AbbreviationTables


@pytest.fixture
def tables():
    return AbbreviationTables(
        tags={'bq': 'blockquote', 'btn': 'button'},
        attributes={'src': 'data-src', 'h': 'href'},
        extended={'blank': ' target="_blank"'},
        implicit={'ul': 'li', 'ol': 'li', 'table': 'tr', 'tr': 'td', 'input': 'label'},
    )


@pytest.fixture
def em():
    return EmmetCompiler(indented=False)
