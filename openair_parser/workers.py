"""Fans airspace blocks out to a thread pool.

Each task carries an integer id. Results come back in completion order and
are sorted by id again before the caller sees them.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional
import logging

from geojson import Feature

from .config import ParserConfig
from .errors import ParserError
from .factory import AirspaceFactory
from .tokens import Token

logger = logging.getLogger(__name__)


@dataclass
class ConvertTask:
    id: int
    block: List[Token]


@dataclass
class ConvertResult:
    id: int
    feature: Optional[Feature] = None
    error: Optional[ParserError] = None


def convert_block(task: ConvertTask, config: ParserConfig) -> ConvertResult:
    """Build and render one block with its own factory; errors are captured."""
    try:
        airspace = AirspaceFactory(config).build(task.block)
        feature = airspace.as_feature(config) if airspace is not None else None
    except ParserError as e:
        return ConvertResult(id=task.id, error=e)
    return ConvertResult(id=task.id, feature=feature)


def convert_blocks(tasks: List[ConvertTask], config: ParserConfig, workers: int = None) -> List[ConvertResult]:
    """Convert all tasks concurrently and return the results ordered by task id.

    A failing task does not cancel its siblings; deciding what a failure
    means for the whole parse is left to the caller.
    """
    workers = workers or config.workers
    results = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(convert_block, task, config): task.id for task in tasks}
        for future in as_completed(futures):
            result = future.result()
            if result.error is not None:
                logger.debug(f"Task {result.id} failed: {result.error}")
            results.append(result)

    logger.info(f"Converted {len(tasks)} blocks with {workers} workers")
    return sorted(results, key=lambda result: result.id)
