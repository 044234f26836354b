"""Parse OpenAIR airspace definitions into validated GeoJSON."""

from .config import ParserConfig
from .errors import BuildError, CompletenessError, GeometryError, GrammarError, ParserError
from .parser import Parser, ParserResult

__all__ = [
    'Parser',
    'ParserConfig',
    'ParserResult',
    'ParserError',
    'GrammarError',
    'BuildError',
    'GeometryError',
    'CompletenessError',
]
