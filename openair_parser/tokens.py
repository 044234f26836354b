"""Typed OpenAIR line tokens and the token order grammar."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet

from .config import VERSION_2


class TokenType(Enum):
    COMMENT = 'COMMENT'
    BLANK = 'BLANK'
    SKIPPED = 'SKIPPED'
    EOF = 'EOF'
    AC = 'AC'  # class
    AN = 'AN'  # name
    AI = 'AI'  # identifier
    AY = 'AY'  # type
    AF = 'AF'  # frequency
    AG = 'AG'  # frequency station name
    AH = 'AH'  # upper limit
    AL = 'AL'  # lower limit
    AX = 'AX'  # transponder code
    AA = 'AA'  # activation window
    DP = 'DP'  # polygon point
    DA = 'DA'  # arc by radius and angles
    DB = 'DB'  # arc by start and end point
    DC = 'DC'  # circle
    DY = 'DY'  # airway segment
    VX = 'VX'  # center
    VD = 'VD'  # arc direction
    VW = 'VW'  # airway width
    TP = 'TP'  # transponder code (legacy)

    def __str__(self):
        return self.value


T = TokenType

IGNORED_TYPES = frozenset({T.COMMENT, T.BLANK, T.SKIPPED})

# Directives that may follow each directive. Ignored tokens are never checked.
ALLOWED_NEXT: Dict[TokenType, FrozenSet[TokenType]] = {
    T.COMMENT: frozenset(TokenType),
    T.BLANK: frozenset(TokenType),
    T.SKIPPED: frozenset(TokenType),
    T.EOF: frozenset(),
    T.AC: frozenset({T.COMMENT, T.AN, T.SKIPPED}),
    T.AN: frozenset({T.COMMENT, T.AL, T.AH, T.SKIPPED}),
    T.AI: frozenset({T.COMMENT, T.AN, T.AY, T.AF, T.AG, T.AL, T.AH, T.SKIPPED, T.TP}),
    T.AY: frozenset({T.COMMENT, T.AI, T.AN, T.SKIPPED}),
    T.AH: frozenset({T.COMMENT, T.AG, T.AF, T.AL, T.DP, T.VW, T.VX, T.SKIPPED, T.VD}),
    T.AL: frozenset({T.COMMENT, T.AG, T.AF, T.AH, T.DP, T.VW, T.VX, T.SKIPPED, T.VD, T.TP}),
    T.AF: frozenset({T.COMMENT, T.AG, T.AL, T.AH, T.SKIPPED, T.DP, T.VW, T.VX, T.VD, T.TP}),
    T.AG: frozenset({T.COMMENT, T.AF, T.AL, T.AH, T.DP, T.VW, T.VX, T.SKIPPED, T.VD}),
    T.AX: frozenset({T.COMMENT, T.AG, T.AL, T.AH, T.SKIPPED, T.DP, T.VW, T.VX, T.VD, T.AN, T.AF, T.AA}),
    T.AA: frozenset({T.COMMENT, T.AA, T.AF, T.AG, T.AL, T.AH, T.SKIPPED, T.DP, T.VW, T.VX, T.VD, T.AX}),
    T.TP: frozenset({T.COMMENT, T.AG, T.AL, T.AH, T.SKIPPED, T.DP, T.VW, T.VX, T.VD, T.AN, T.AF}),
    T.DP: frozenset({T.COMMENT, T.DP, T.DA, T.BLANK, T.EOF, T.VD, T.VX, T.SKIPPED}),
    T.DA: frozenset({T.BLANK, T.COMMENT, T.DA, T.DP, T.VD, T.VX, T.SKIPPED}),
    T.DB: frozenset({T.BLANK, T.COMMENT, T.DP, T.VD, T.VX, T.SKIPPED}),
    T.DC: frozenset({T.BLANK, T.COMMENT, T.EOF, T.SKIPPED}),
    T.DY: frozenset({T.COMMENT, T.DY, T.BLANK, T.EOF, T.SKIPPED}),
    T.VX: frozenset({T.COMMENT, T.DC, T.DB, T.DA, T.VD, T.SKIPPED}),
    T.VD: frozenset({T.COMMENT, T.VX, T.DA, T.DB, T.SKIPPED}),
    T.VW: frozenset({T.COMMENT, T.DY, T.BLANK, T.EOF, T.SKIPPED}),
}

# Version 2 adds identifier, type, frequency, transponder and activation directives
ALLOWED_NEXT_V2: Dict[TokenType, FrozenSet[TokenType]] = {
    T.AC: frozenset({T.AI, T.AY}),
    T.AN: frozenset({T.AI, T.AF, T.AG, T.TP, T.AX, T.AA}),
    T.AI: frozenset({T.AX, T.AA}),
    T.AH: frozenset({T.AX, T.AA}),
    T.AL: frozenset({T.AX, T.AA}),
    T.AF: frozenset({T.AX, T.AA}),
    T.AG: frozenset({T.AX, T.AA}),
    T.TP: frozenset({T.AX, T.AA}),
}


def allowed_next(token_type: TokenType, version: int) -> FrozenSet[TokenType]:
    allowed = ALLOWED_NEXT[token_type]
    if version == VERSION_2:
        allowed = allowed | ALLOWED_NEXT_V2.get(token_type, frozenset())
    return allowed


@dataclass(frozen=True)
class Token:
    """A single tokenized OpenAIR line.

    line keeps the verbatim source line, metadata holds the parsed field
    values (e.g. "coordinate" for DP or "altitude" for AH/AL).
    """
    type: TokenType
    line: str
    line_number: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_ignored(self) -> bool:
        return self.type in IGNORED_TYPES

    def allows(self, other: 'Token', version: int) -> bool:
        return other.type in allowed_next(self.type, version)
