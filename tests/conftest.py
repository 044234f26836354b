"""Shared fixtures for building token blocks without going through text."""

import pytest

from openair_parser.config import ParserConfig

from helpers import header, make_block


@pytest.fixture
def v1_config():
    return ParserConfig(version=1)


@pytest.fixture
def triangle_block():
    return make_block(*header(),
                      ('DP', {'coordinate': (0.0, 0.0)}),
                      ('DP', {'coordinate': (0.0, 1.0)}),
                      ('DP', {'coordinate': (1.0, 1.0)}),
                      ('DP', {'coordinate': (0.0, 0.0)}))


@pytest.fixture
def bowtie():
    """Self-intersecting ring; the lobe around (2, 1) is four times the other."""
    return [(0.0, 0.0), (2.0, 2.0), (2.0, 0.0), (0.0, 1.0), (0.0, 0.0)]
