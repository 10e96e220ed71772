from __future__ import annotations

from pricelist_diff.services.formatter import format_vehicle_fields

H = ["Tipo", "Clase", "Versiones", "Preciobase", "Preciobase2"]


def test_year_header_rewritten_with_current_model():
    grid = [
        H,
        [2, "", "INTEGRA", "", ""],
        [3, "", "2025 INTEGRA Unidades Nuevas", "x", "y"],
    ]
    out = format_vehicle_fields(grid)
    assert out[1] == [2, "", "INTEGRA", "", ""]
    assert out[2] == [3, "", "2025 INTEGRA", "Unidades Nuevas", ""]


def test_condition_match_is_case_insensitive_and_keeps_source_spelling():
    grid = [H, [2, "", "MDX"], [3, "", "2024 mdx UNIDADES USADAS"]]
    out = format_vehicle_fields(grid)
    assert out[2] == [3, "", "2024 MDX", "UNIDADES USADAS", ""]


def test_year_header_without_condition_or_year():
    grid = [H, [2, "", "RDX", "", ""], [3, "", "Edicion especial", "nota", "z"]]
    out = format_vehicle_fields(grid)
    assert out[2] == [3, "", "RDX", "", ""]


def test_model_changes_per_section():
    grid = [
        H,
        [2, "", "A", "", ""],
        [3, "", "2025", "", ""],
        [2, "", "B", "", ""],
        [3, "", "2024", "", ""],
    ]
    out = format_vehicle_fields(grid)
    assert out[2][2] == "2025 A"
    assert out[4][2] == "2024 B"


def test_lista_removed_from_version_price_note():
    grid = [H, [4, "A", "Trim", "Lista 650000", "620000"], [4, "A", "Trim 2", "LISTA", "1"]]
    out = format_vehicle_fields(grid)
    assert out[1][3] == "650000"
    assert out[2][3] == ""


def test_numeric_price_untouched():
    grid = [H, [4, "A", "Trim", 650000, 620000]]
    assert format_vehicle_fields(grid)[1] == [4, "A", "Trim", 650000, 620000]


def test_short_year_header_is_padded():
    grid = [H, [2, "", "TLX"], [3, "", "2023"]]
    assert format_vehicle_fields(grid)[2] == [3, "", "2023 TLX", "", ""]


def test_input_grid_not_mutated():
    row = [4, "A", "Trim", "Lista 1", "2"]
    grid = [H, row]
    format_vehicle_fields(grid)
    assert row[3] == "Lista 1"
