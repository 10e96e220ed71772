from __future__ import annotations

from pricelist_diff.services.reorder import reorder_all, reorder_section, split_sections

H = ["Tipo", "Clase", "Versiones", "Preciobase", "Preciobase2"]


def _labels(rows):
    return [r[2] for r in rows]


def test_blocks_sorted_by_year_desc_before_condition():
    section = [
        [2, "", "INTEGRA", "", ""],
        [3, "", "2023 Unidades Usadas", "", ""],
        [4, "", "Usada 1", "1", "1"],
        [3, "", "2025 Unidades Nuevas", "", ""],
        [4, "", "Nueva 1", "2", "2"],
        [3, "", "2024", "", ""],
        [4, "", "Sin nota", "3", "3"],
    ]
    out = reorder_section(section)
    assert _labels(out) == [
        "INTEGRA",
        "2025 Unidades Nuevas",
        "Nueva 1",
        "2024",
        "Sin nota",
        "2023 Unidades Usadas",
        "Usada 1",
    ]


def test_same_year_sorted_by_condition_then_encounter_order():
    section = [
        [2, "", "MDX"],
        [3, "", "2025 Demo"],
        [3, "", "2025 Unidades Usadas"],
        [3, "", "2025 Unidades Nuevas"],
        [3, "", "2025 Otra"],
    ]
    out = reorder_section(section)
    assert _labels(out) == [
        "MDX",
        "2025 Unidades Nuevas",
        "2025 Unidades Usadas",
        "2025 Demo",
        "2025 Otra",
    ]


def test_version_rows_keep_internal_order():
    section = [
        [2, "", "RDX"],
        [3, "", "2024"],
        [4, "", "b"],
        [4, "", "a"],
        [3, "", "2025"],
        [4, "", "z"],
    ]
    assert _labels(reorder_section(section)) == ["RDX", "2025", "z", "2024", "b", "a"]


def test_rows_outside_blocks_are_kept():
    section = [
        [2, "", "TLX"],
        [4, "", "orphan"],
        [3, "", "2024"],
        [4, "", "v24"],
        [0, "", ""],
        [3, "", "2025"],
    ]
    out = reorder_section(section)
    assert _labels(out) == ["TLX", "orphan", "2025", "2024", "v24", ""]
    assert out[-1][0] == 0


def test_rows_before_first_section_pass_through():
    grid = [
        H,
        [1, "", "Encabezado", "", ""],
        [3, "", "2020", "", ""],
        [3, "", "2022", "", ""],
        [2, "", "A", "", ""],
        [3, "", "2020", "", ""],
        [3, "", "2022", "", ""],
    ]
    out = reorder_all(grid)
    assert out[0] == H
    assert _labels(out[1:]) == ["Encabezado", "2020", "2022", "A", "2022", "2020"]


def test_split_sections():
    lead, sections = split_sections([[1, "", "x"], [2, "", "A"], [3, "", "2025"], [2, "", "B"]])
    assert lead == [[1, "", "x"]]
    assert [s[0][2] for s in sections] == ["A", "B"]
    assert len(sections[0]) == 2


def test_reorder_all_empty():
    assert reorder_all([]) == []
    assert reorder_all([H]) == [H]


def test_trailing_separators_are_not_stacked():
    section = [
        [2, "", "B"],
        [0, "", ""],
        [3, "", "2025"],
        [4, "", "v"],
        [0, "", ""],
    ]
    out = reorder_section(section)
    assert [r[0] for r in out] == [2, 3, 4, 0]
