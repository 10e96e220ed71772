from __future__ import annotations

import pytest

from pricelist_diff.services.keys import INVALID_KEY, fallback_key, get_key


def test_full_key_uses_last_column_as_year():
    row = [4, "A", "  Integra   A-Spec ", "650000", "620000", 2025]
    assert get_key(row) == "4|2025|integra a-spec"


def test_numeric_and_text_type_cells_share_a_key():
    assert get_key(["4", "", "Trim", 2024]) == get_key([4.0, "", "Trim", "2024"])


@pytest.mark.parametrize("year", [0, "", "0", None])
def test_missing_year_uses_placeholder(year):
    assert get_key([3, "", "Edicion", year]) == "3|_|edicion"


def test_zero_version_label_is_empty():
    assert get_key([0, "", 0, 0]) == "0|_|"


@pytest.mark.parametrize("row", [[], [4], [4, "A"], "4|a|b", None, 42])
def test_unkeyable_rows_get_sentinel(row):
    assert get_key(row) == INVALID_KEY


def test_fallback_key_drops_year_segment():
    assert fallback_key("4|2025|integra") == "4||integra"
    assert fallback_key("4|_|integra") == "4||integra"


def test_fallback_key_only_touches_first_segment():
    assert fallback_key("4|2025|a|b|c") == "4||a|b|c"
