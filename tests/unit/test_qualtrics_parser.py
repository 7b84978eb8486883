"""
Unit tests for the Qualtrics CSV export parser.
"""

import pytest

from data.qualtrics import CSVFormatError, ElectionPosition, parse_qualtrics_csv

HEADER_IDS = "StartDate,EndDate,Q1_1,Q1_2,Q1_3,Q2_1,Q2_2"
QUESTIONS = (
    "Start Date,End Date,"
    "Please Rank the candidates for the President. - Alice,"
    "Please Rank the candidates for the President. - Bob,"
    "Please Rank the candidates for the President. - Carol,"
    "Please rank the candidates for the Treasurer. - Dan,"
    "Please rank the candidates for the Treasurer. - Eve"
)
IMPORT_IDS = "id1,id2,id3,id4,id5,id6,id7"


def make_export(*responses):
    return "\n".join([HEADER_IDS, QUESTIONS, IMPORT_IDS, *responses]) + "\n"


@pytest.mark.unit
class TestParseQualtricsCSV:
    def test_positions_in_column_order(self):
        positions = parse_qualtrics_csv(make_export("d1,d1,1,2,3,1,2"))
        assert [p.title for p in positions] == ["President", "Treasurer"]
        assert positions[0].candidates == ["Alice", "Bob", "Carol"]
        assert positions[1].candidates == ["Dan", "Eve"]

    def test_ballots_ordered_by_rank(self):
        positions = parse_qualtrics_csv(
            make_export("d,d,3,1,2,2,1", "d,d,1,,2,,", "d,d,,,,1,")
        )
        president, treasurer = positions
        assert president.ballots == [["Bob", "Carol", "Alice"], ["Alice", "Carol"]]
        assert treasurer.ballots == [["Eve", "Dan"], ["Dan"]]

    def test_non_numeric_ranks_ignored(self):
        positions = parse_qualtrics_csv(make_export("d,d,x,1,,1,2"))
        assert positions[0].ballots == [["Bob"]]

    def test_decimal_ranks_use_leading_integer(self):
        positions = parse_qualtrics_csv(make_export("d,d,2.0,1.0,, 3,1"))
        assert positions[0].ballots == [["Bob", "Alice"]]
        assert positions[1].ballots == [["Eve", "Dan"]]

    def test_blank_lines_skipped(self):
        content = make_export("d,d,1,2,3,1,2").replace("\n", "\n\n", 1)
        positions = parse_qualtrics_csv(content)
        assert positions[0].ballots == [["Alice", "Bob", "Carol"]]

    def test_too_short(self):
        with pytest.raises(CSVFormatError, match="too short"):
            parse_qualtrics_csv("\n".join([HEADER_IDS, QUESTIONS, IMPORT_IDS]))

    def test_no_ranking_columns(self):
        content = "a,b\nStart Date,End Date\nx,y\n1,2\n"
        with pytest.raises(CSVFormatError, match="No valid position columns"):
            parse_qualtrics_csv(content)

    def test_csv_format_error_is_value_error(self):
        assert issubclass(CSVFormatError, ValueError)


@pytest.mark.unit
def test_position_to_config():
    position = ElectionPosition("Chair", ["A", "B"], [["A"], ["B", "A"]])
    config = position.to_config("borda", seats=1)
    assert config.title == "Chair"
    assert config.method == "borda"
    assert config.ballots == [["A"], ["B", "A"]]
    assert position.to_dict() == {
        "title": "Chair",
        "candidates": ["A", "B"],
        "ballots": [["A"], ["B", "A"]],
    }
