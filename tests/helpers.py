"""Token block builders shared by the test modules."""

from openair_parser.tokens import Token, TokenType
from openair_parser.util.units import Altitude


def make_block(*entries, start=1):
    """Build tokens from (type, metadata) pairs on consecutive lines."""
    return [Token(TokenType[token_type], f"{token_type} line", start + index, metadata)
            for index, (token_type, metadata) in enumerate(entries)]


def header(name='TEST', airspace_class='R', lower=None, upper=None):
    """AC/AN/AL/AH entries of a version 1 block."""
    return [
        ('AC', {'class': airspace_class}),
        ('AN', {'name': name}),
        ('AL', {'altitude': lower or Altitude.surface()}),
        ('AH', {'altitude': upper or Altitude(1000, 'FT', 'MSL')}),
    ]
