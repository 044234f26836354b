"""Splits a token stream into airspace blocks and validates the block grammar."""

from enum import Enum
from typing import List, Optional
import logging

from .config import VERSION_2
from .errors import GrammarError
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

T = TokenType

REQUIRED_TYPES = [T.AC, T.AN, T.AL, T.AH]
REQUIRED_TYPES_V2 = REQUIRED_TYPES + [T.AY]


class State(Enum):
    START = 'START'
    READ = 'READ'


class Segmenter:
    """Groups tokens into blocks delimited by AC tokens.

    Each block is validated as soon as it is closed, so the first grammar
    violation in the file aborts segmentation. Comments, blanks and skipped
    lines are kept in the block they appear in but never change state.
    """

    def __init__(self, version: int = VERSION_2):
        self.version = version
        self.required_types = REQUIRED_TYPES_V2 if version == VERSION_2 else REQUIRED_TYPES

    def segment(self, tokens: List[Token]) -> List[List[Token]]:
        blocks = []
        pending: List[Token] = []
        state = State.START

        for token in tokens:
            if token.is_ignored:
                pending.append(token)
                continue
            if token.type == T.EOF:
                if state == State.READ and pending:
                    blocks.append(self.validate(pending))
                    pending = []
                break
            if token.type == T.AC and state == State.READ:
                blocks.append(self.validate(pending))
                pending = []
            state = State.READ
            pending.append(token)

        # streams without EOF, e.g. a single block handed over by a caller
        if state == State.READ and pending:
            blocks.append(self.validate(pending))

        logger.debug(f"Segmented {len(tokens)} tokens into {len(blocks)} blocks")
        return blocks

    def validate(self, block: List[Token]) -> List[Token]:
        self.validate_order(block)
        self.validate_inventory(block)
        return block

    def validate_order(self, block: List[Token]) -> None:
        first = next((token for token in block if not token.is_ignored), None)
        if first is None:
            return
        if first.type != T.AC:
            raise GrammarError(
                f"The first token must be of type 'AC'. Token '{first.type}' found on line {first.line_number}.",
                line_number=first.line_number)

        for index, token in enumerate(block):
            if token.is_ignored:
                continue
            following = self.next_relevant(block, index)
            if following is None:
                continue
            if not token.allows(following, self.version):
                raise GrammarError(
                    f"Token '{token.type}' on line {token.line_number} does not allow subsequent "
                    f"token '{following.type}' on line {following.line_number}",
                    line_number=token.line_number)

    @staticmethod
    def next_relevant(block: List[Token], index: int) -> Optional[Token]:
        for token in block[index + 1:]:
            if not token.is_ignored:
                return token
        return None

    def validate_inventory(self, block: List[Token]) -> None:
        present = {token.type for token in block}
        start = next((token for token in block if not token.is_ignored), block[0])

        missing = [token_type for token_type in self.required_types if token_type not in present]
        if missing:
            names = ', '.join(str(token_type) for token_type in missing)
            raise GrammarError(
                f"Block starting on line {start.line_number} is missing required tokens: {names}",
                line_number=start.line_number)

        if T.AG in present and T.AF not in present:
            ag = next(token for token in block if token.type == T.AG)
            raise GrammarError(
                f"Token 'AG' on line {ag.line_number} requires a preceding 'AF' token in the same block",
                line_number=ag.line_number)


def segment(tokens: List[Token], version: int = VERSION_2) -> List[List[Token]]:
    return Segmenter(version).segment(tokens)
