from __future__ import annotations

from pricelist_diff.services.year_context import drop_temp_column, prepare_for_comparison, stamp_year_context

H = ["Tipo", "Clase", "Versiones", "Preciobase", "Preciobase2"]


def _years(grid):
    return [r[-1] for r in grid[1:]]


def test_year_forward_filled_from_year_headers():
    grid = [
        H,
        [2, "", "Model A", "", ""],
        [3, "", "2024 Unidades Nuevas", "", ""],
        [4, "", "Trim 1", "1000", "900"],
        [3, "", "2025", "", ""],
        [4, "", "Trim 2", "1100", "950"],
    ]
    out = stamp_year_context(grid)
    assert out[0] == [*H, "AñoContexto"]
    assert _years(out) == [0, 2024, 2024, 2025, 2025]


def test_year_is_sticky_when_header_has_no_year():
    grid = [H, [3, "", "2024", "", ""], [3, "", "Sin año", "", ""], [4, "", "x", "", ""]]
    assert _years(stamp_year_context(grid)) == [2024, 2024, 2024]


def test_version_row_seeds_year_only_while_unknown():
    grid = [
        H,
        [4, "", "Trim 2023 edition", "", ""],
        [4, "", "Trim 2019", "", ""],
        [3, "", "2025", "", ""],
        [4, "", "Trim 2020", "", ""],
    ]
    assert _years(stamp_year_context(grid)) == [2023, 2023, 2025, 2025]


def test_short_rows_padded_and_non_rows_dropped():
    grid = [H, [4, "", "x"], None, [2]]
    out = stamp_year_context(grid, label="YearContext")
    assert out[0][-1] == "YearContext"
    assert out[1] == [4, "", "x", "", "", 0]
    assert out[2] == [2, "", "", "", "", 0]
    assert len(out) == 3


def test_input_not_mutated():
    row = [3, "", "2024", "", ""]
    grid = [H, row]
    stamp_year_context(grid)
    assert row == [3, "", "2024", "", ""]


def test_drop_temp_column():
    grid = [["Tipo", "Versiones", "TEMPORAL", "Precio"], [4, "x", "t", 1], [4, "y"]]
    assert drop_temp_column(grid) == [["Tipo", "Versiones", "Precio"], [4, "x", 1], [4, "y"]]


def test_drop_temp_column_absent():
    grid = [["Tipo", "Versiones"], [4, "x"]]
    assert drop_temp_column(grid) is grid


def test_prepare_for_comparison_stamps_before_pruning():
    grid = [[*H, "Temp"], [3, "", "2024", "", "", "t"]]
    out = prepare_for_comparison(grid)
    assert out == [[*H, "AñoContexto"], [3, "", "2024", "", "", 2024]]
