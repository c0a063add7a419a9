"""
Unit tests — package comparison (comparison_service.py).

Coverage:
  - bounded SelectionSet: toggle pairs, 4th id rejected, no eviction
  - benefit rows: catalog-wide union in first-seen order, stable under toggles
  - matrix cells and Markdown rendering
"""
from __future__ import annotations

import pytest

from expo_bot.services.comparison_service import (
    ABSENT_GLYPH,
    MAX_COMPARED,
    PRESENT_GLYPH,
    SelectionSet,
    build_comparison,
    compute_benefit_rows,
    render_comparison,
)


@pytest.fixture
def catalog(package_factory):
    make_package = package_factory
    return [
        make_package("gold",   ("Booth", "Logo", "Keynote"), price="500000"),
        make_package("silver", ("Booth", "Logo"),            price="250000"),
        make_package("bronze", ("Logo", "Passes"),           price="100000"),
        make_package("basic",  (),                           price="50000"),
    ]


# ─────────────────────────── SelectionSet ─────────────────────────────────────

class TestSelectionSet:

    def test_toggle_adds_then_removes(self) -> None:
        sel = SelectionSet()
        assert sel.toggle("gold") is True
        assert "gold" in sel
        assert sel.toggle("gold") is True
        assert "gold" not in sel

    def test_toggle_pair_is_identity(self) -> None:
        sel = SelectionSet(["gold", "silver"])
        before = SelectionSet(sel.ids)
        sel.toggle("bronze")
        sel.toggle("bronze")
        assert sel == before

    def test_fourth_selection_rejected(self) -> None:
        sel = SelectionSet(["gold", "silver", "bronze"])
        assert sel.is_full
        assert sel.toggle("basic") is False
        assert sel.ids == ("gold", "silver", "bronze")

    def test_deselect_when_full_makes_room(self) -> None:
        sel = SelectionSet(["gold", "silver", "bronze"])
        assert sel.toggle("silver") is True
        assert sel.toggle("basic") is True
        assert sel.ids == ("gold", "bronze", "basic")

    def test_constructor_caps_and_dedupes(self) -> None:
        sel = SelectionSet(["a", "a", "b", "c", "d"])
        assert sel.ids == ("a", "b", "c")
        assert len(sel) == MAX_COMPARED


# ─────────────────────────── Benefit rows ─────────────────────────────────────

class TestBenefitRows:

    def test_union_in_first_seen_order(self, catalog) -> None:
        assert compute_benefit_rows(catalog) == ["Booth", "Logo", "Keynote", "Passes"]

    def test_empty_catalog(self) -> None:
        assert compute_benefit_rows([]) == []

    def test_rows_do_not_depend_on_selection(self, catalog) -> None:
        m1 = build_comparison(catalog, SelectionSet(["bronze"]))
        m2 = build_comparison(catalog, SelectionSet(["gold", "silver"]))
        assert m1.rows == m2.rows


# ─────────────────────────── Matrix ───────────────────────────────────────────

class TestComparisonMatrix:

    def test_gold_silver_example(self, package_factory) -> None:
        gold = package_factory("gold", ("Booth", "Logo", "Keynote"))
        silver = package_factory("silver", ("Booth", "Logo"))
        matrix = build_comparison([gold, silver], SelectionSet(["gold", "silver"]))
        assert list(matrix.rows) == ["Booth", "Logo", "Keynote"]
        assert matrix.grid() == [[True, True], [True, True], [True, False]]
        assert matrix.cell("silver", "Keynote") is False

    def test_columns_follow_catalog_order(self, catalog) -> None:
        matrix = build_comparison(catalog, SelectionSet(["bronze", "gold"]))
        assert [p.id for p in matrix.columns] == ["gold", "bronze"]

    def test_unselected_package_cell_raises(self, catalog) -> None:
        matrix = build_comparison(catalog, SelectionSet(["gold"]))
        with pytest.raises(KeyError):
            matrix.cell("silver", "Booth")

    def test_package_without_benefits_has_no_ticks(self, catalog) -> None:
        matrix = build_comparison(catalog, SelectionSet(["basic"]))
        assert all(row == [False] for row in matrix.grid())


class TestRender:

    def test_empty_selection_prompt(self, catalog) -> None:
        text = render_comparison(build_comparison(catalog, SelectionSet()))
        assert text == "_Select up to 3 packages to compare._"

    def test_rendered_glyphs(self, catalog) -> None:
        text = render_comparison(build_comparison(catalog, SelectionSet(["silver"])))
        assert f"{PRESENT_GLYPH}  Booth" in text
        assert f"{ABSENT_GLYPH}  Keynote" in text
        assert "KES 250,000" in text

    def test_markdown_characters_escaped(self, package_factory) -> None:
        pkg = package_factory("gold", ("VIP_lounge access", "Logo *large*"), name="Gold_Plus")
        text = render_comparison(build_comparison([pkg], SelectionSet(["gold"])))
        assert "*Gold\\_Plus*" in text
        assert f"{PRESENT_GLYPH}  VIP\\_lounge access" in text
        assert f"{PRESENT_GLYPH}  Logo \\*large\\*" in text
        assert "Gold_Plus" not in text
