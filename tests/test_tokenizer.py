"""Test cases for line classification and field parsing of OpenAIR directives."""

import pytest

from openair_parser.config import ParserConfig
from openair_parser.errors import GrammarError
from openair_parser.tokenizer import Tokenizer
from openair_parser.tokens import TokenType
from openair_parser.util.units import Altitude


@pytest.fixture
def tokenizer():
    return Tokenizer(ParserConfig(version=1))


@pytest.fixture
def tokenizer_v2():
    return Tokenizer(ParserConfig(version=2, allowed_types=['CTR', 'TMA']))


class TestLineClassification:

    def test_one_token_per_line_plus_eof(self, tokenizer):
        tokens = tokenizer.tokenize("* header\nAC D\nAN TEST\n\nSP 0,1,0,255,0\n")
        assert [t.type for t in tokens] == [
            TokenType.COMMENT, TokenType.AC, TokenType.AN, TokenType.BLANK, TokenType.SKIPPED, TokenType.EOF]
        assert [t.line_number for t in tokens] == [1, 2, 3, 4, 5, 5]

    def test_ignored_types(self, tokenizer):
        tokens = tokenizer.tokenize("* comment\n\nAT 52:24:33 N 013:11:02 E\nV Z=5")
        assert all(t.is_ignored for t in tokens[:-1])

    def test_empty_text_has_only_eof(self, tokenizer):
        tokens = tokenizer.tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].line_number == 0

    def test_unknown_syntax(self, tokenizer):
        with pytest.raises(GrammarError) as info:
            tokenizer.tokenize("AC D\nXX something")
        assert info.value.line_number == 2
        assert "Failed to read line 2. Unknown syntax." in str(info.value)

    def test_inline_comment_removed_but_line_kept(self, tokenizer):
        token = tokenizer.tokenize_line("AN FRANKFURT * comment", 1)
        assert token.metadata == {'name': 'FRANKFURT'}
        assert token.line == "AN FRANKFURT * comment"


class TestClassAndType:

    def test_known_class(self, tokenizer):
        assert tokenizer.tokenize_line("AC GP", 1).metadata == {'class': 'GP'}

    def test_unknown_class(self, tokenizer):
        with pytest.raises(GrammarError) as info:
            tokenizer.tokenize_line("AC X", 7)
        assert info.value.line_number == 7

    def test_version_2_classes(self, tokenizer_v2):
        assert tokenizer_v2.tokenize_line("AC UNCLASSIFIED", 1).metadata == {'class': 'UNCLASSIFIED'}
        with pytest.raises(GrammarError):
            tokenizer_v2.tokenize_line("AC R", 1)

    def test_allowed_types(self, tokenizer_v2):
        assert tokenizer_v2.tokenize_line("AY CTR", 1).metadata == {'type': 'CTR'}
        with pytest.raises(GrammarError):
            tokenizer_v2.tokenize_line("AY GLIDING_SECTOR", 1)

    def test_any_type_without_list(self):
        tokenizer = Tokenizer(ParserConfig(version=2))
        assert tokenizer.tokenize_line("AY GLIDING_SECTOR", 1).metadata == {'type': 'GLIDING_SECTOR'}


class TestAltitudes:

    @pytest.mark.parametrize("line,expected", [
        ("AH 2500ft AMSL", Altitude(2500, 'FT', 'MSL')),
        ("AH 1000FT MSL", Altitude(1000, 'FT', 'MSL')),
        ("AL 300 m AGL", Altitude(300, 'M', 'GND')),
        ("AL 1500.5FT GND", Altitude(1500.5, 'FT', 'GND')),
        ("AH FL65", Altitude(65, 'FL', 'STD')),
        ("AH FL 100", Altitude(100, 'FL', 'STD')),
        ("AL GND", Altitude(0, 'FT', 'GND')),
        ("AL SFC", Altitude(0, 'FT', 'GND')),
        ("AH UNL", Altitude(999, 'FL', 'STD')),
    ])
    def test_altitude_readers(self, tokenizer, line, expected):
        assert tokenizer.tokenize_line(line, 1).metadata['altitude'] == expected

    def test_unknown_altitude(self, tokenizer):
        with pytest.raises(GrammarError):
            tokenizer.tokenize_line("AH 2500", 1)

    def test_unlimited_value_from_config(self):
        tokenizer = Tokenizer(ParserConfig(version=1, unlimited=600))
        assert tokenizer.tokenize_line("AH UNL", 1).metadata['altitude'] == Altitude(600, 'FL', 'STD')

    def test_target_unit_and_rounding(self):
        tokenizer = Tokenizer(ParserConfig(version=1, target_alt_unit='FT', round_alt_values=True))
        altitude = tokenizer.tokenize_line("AH 1000m AMSL", 1).metadata['altitude']
        assert altitude == Altitude(3281, 'FT', 'MSL')


class TestGeometryDirectives:

    def test_point(self, tokenizer):
        lon, lat = tokenizer.tokenize_line("DP 52:24:33 N 013:11:02 E", 1).metadata['coordinate']
        assert lat == pytest.approx(52.409167, abs=1e-6)
        assert lon == pytest.approx(13.183889, abs=1e-6)

    def test_bad_point(self, tokenizer):
        with pytest.raises(GrammarError) as info:
            tokenizer.tokenize_line("DP 52:24:33 N", 4)
        assert info.value.line_number == 4

    def test_center_and_direction(self, tokenizer):
        assert tokenizer.tokenize_line("V X=52:00:00 N 013:00:00 E", 1).metadata['coordinate'] == (13.0, 52.0)
        assert tokenizer.tokenize_line("V D=-", 1).metadata == {'clockwise': False}
        assert tokenizer.tokenize_line("V D=+", 1).metadata == {'clockwise': True}
        with pytest.raises(GrammarError):
            tokenizer.tokenize_line("V D=x", 1)

    def test_circle_radius(self, tokenizer):
        assert tokenizer.tokenize_line("DC 2.5", 1).metadata == {'radius': 2.5}
        with pytest.raises(GrammarError):
            tokenizer.tokenize_line("DC two", 1)

    def test_arc_endpoints(self, tokenizer):
        metadata = tokenizer.tokenize_line("DB 52:00:00 N 013:00:00 E, 52:10:00 N 013:10:00 E", 1).metadata
        assert metadata['start'] == (13.0, 52.0)
        assert metadata['end'][1] == pytest.approx(52 + 10 / 60)

    def test_arc_angles_are_normalized(self, tokenizer):
        metadata = tokenizer.tokenize_line("DA 10, -90, 450", 1).metadata
        assert metadata == {'radius': 10.0, 'start_bearing': 270.0, 'end_bearing': 90.0}

    def test_airway(self, tokenizer):
        assert tokenizer.tokenize_line("V W=2.5", 1).metadata == {'width': 2.5}
        assert tokenizer.tokenize_line("DY 52:00:00 N 013:00:00 E", 1).metadata['coordinate'] == (13.0, 52.0)


class TestExtendedDirectives:

    def test_frequency(self, tokenizer_v2):
        assert tokenizer_v2.tokenize_line("AF 123.505", 1).metadata == {'frequency': '123.505'}
        assert tokenizer_v2.tokenize_line("AG FRANKFURT RADAR", 1).metadata == {'name': 'FRANKFURT RADAR'}
        with pytest.raises(GrammarError):
            tokenizer_v2.tokenize_line("AF 123.5", 1)

    def test_transponder_code(self, tokenizer_v2):
        assert tokenizer_v2.tokenize_line("AX 7000", 1).metadata == {'code': '7000'}
        assert tokenizer_v2.tokenize_line("TP 0020", 1).metadata == {'code': '0020'}
        with pytest.raises(GrammarError):
            tokenizer_v2.tokenize_line("AX 7800", 1)

    def test_identifier(self, tokenizer_v2):
        assert tokenizer_v2.tokenize_line("AI b3836bab-6bc3-48c1-b918-01c2559e26fa", 1).metadata == {
            'identifier': 'b3836bab-6bc3-48c1-b918-01c2559e26fa'}

    def test_activation_window(self, tokenizer_v2):
        metadata = tokenizer_v2.tokenize_line("AA 2023-12-16T12:00Z/2023-12-16T13:00Z", 1).metadata
        assert metadata == {'by_notam': False,
                            'activation': {'start': '2023-12-16T12:00:00Z', 'end': '2023-12-16T13:00:00Z'}}

    def test_open_ended_activation_window(self, tokenizer_v2):
        metadata = tokenizer_v2.tokenize_line("AA NONE/2023-12-16T13:00+01:00", 1).metadata
        assert metadata['activation'] == {'end': '2023-12-16T12:00:00Z'}

    def test_by_notam(self, tokenizer_v2):
        assert tokenizer_v2.tokenize_line("AA NONE/NONE", 1).metadata == {'by_notam': True, 'activation': None}

    @pytest.mark.parametrize("line", [
        "AA 2023-12-16T13:00Z/2023-12-16T12:00Z",
        "AA yesterday/NONE",
        "AA 2023-12-16T12:00Z",
    ])
    def test_invalid_activation(self, tokenizer_v2, line):
        with pytest.raises(GrammarError):
            tokenizer_v2.tokenize_line(line, 1)
