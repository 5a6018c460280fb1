import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cabinet import coordinates
from cabinet.coordinates import DrawerSize, InvalidCoordinateError, Section


def test_parse_drawer_id_splits_row_and_column():
    assert coordinates.parse_drawer_id("A1") == ("A", 1)
    assert coordinates.parse_drawer_id("L15") == ("L", 15)
    assert coordinates.row_of("C12") == "C"
    assert coordinates.start_column_of("C12") == 12


@pytest.mark.parametrize("value", ["", "A0", "A01", "A16", "M1", "a1", "AA1", "A1x", None])
def test_parse_drawer_id_rejects_invalid(value):
    with pytest.raises(InvalidCoordinateError):
        coordinates.parse_drawer_id(value)


def test_format_cell_is_zero_padded():
    assert coordinates.format_cell("A", 1) == "A01"
    assert coordinates.format_cell("K", 15) == "K15"
    assert coordinates.format_drawer_id("B", 7) == "B7"


def test_sections_split_at_column_ten():
    assert coordinates.section_of(9) is Section.LEFT
    assert coordinates.section_of(10) is Section.RIGHT
    assert list(coordinates.section_columns(Section.LEFT)) == list(range(1, 10))
    assert list(coordinates.section_columns(Section.RIGHT)) == list(range(10, 16))


def test_spans_per_section():
    assert coordinates.span_for(Section.LEFT, "SMALL") == 1
    assert coordinates.span_for(Section.LEFT, "MEDIUM") == 2
    assert coordinates.span_for(Section.LEFT, "LARGE") == 3
    assert coordinates.span_for(Section.RIGHT, "SMALL") == 1
    assert coordinates.span_for(Section.RIGHT, "MEDIUM") == 1
    assert coordinates.span_for(Section.RIGHT, "LARGE") == 2


def test_parse_size_is_case_insensitive():
    assert coordinates.parse_size(" medium ") is DrawerSize.MEDIUM
    with pytest.raises(InvalidCoordinateError):
        coordinates.parse_size("HUGE")


def test_validate_column_rejects_bool_and_out_of_range():
    with pytest.raises(InvalidCoordinateError):
        coordinates.validate_column(True)
    with pytest.raises(InvalidCoordinateError):
        coordinates.validate_column(0)
    with pytest.raises(InvalidCoordinateError):
        coordinates.validate_column(16)


def test_default_sizes():
    assert coordinates.default_size_for(Section.LEFT) is DrawerSize.SMALL
    assert coordinates.default_size_for(Section.RIGHT) is DrawerSize.MEDIUM
