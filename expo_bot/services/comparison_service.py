"""
Package comparison — bounded selection plus the benefit matrix.

The row axis is the union of all benefits across the whole catalog (first
seen order), so row labels do not move while the user toggles columns.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from expo_bot.services.package_service import Package
from expo_bot.utils import escape_md

MAX_COMPARED = 3

PRESENT_GLYPH = "✅"
ABSENT_GLYPH  = "❌"


class SelectionSet:
    """
    Ordered package ids, at most `capacity` of them.

    `toggle` removes an id that is already selected, appends a new one while
    there is room, and rejects it otherwise — nothing is evicted.
    """

    def __init__(self, ids: Iterable[str] = (), capacity: int = MAX_COMPARED) -> None:
        self.capacity = capacity
        self._ids: List[str] = []
        for pid in ids:
            if pid not in self._ids and len(self._ids) < capacity:
                self._ids.append(pid)

    def toggle(self, package_id: str) -> bool:
        """Returns False when the id was rejected because the set is full."""
        if package_id in self._ids:
            self._ids.remove(package_id)
            return True
        if len(self._ids) < self.capacity:
            self._ids.append(package_id)
            return True
        return False

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._ids)

    @property
    def is_full(self) -> bool:
        return len(self._ids) >= self.capacity

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return self._ids == other._ids

    def __repr__(self) -> str:
        return f"SelectionSet({self._ids!r})"


def compute_benefit_rows(packages: Sequence[Package]) -> List[str]:
    """Every distinct benefit across all packages, in first-seen order."""
    return list(dict.fromkeys(b for pkg in packages for b in pkg.benefits))


@dataclass(frozen=True)
class ComparisonMatrix:
    columns: tuple[Package, ...]
    rows: tuple[str, ...]

    def cell(self, package_id: str, benefit: str) -> bool:
        pkg = next((p for p in self.columns if p.id == package_id), None)
        if pkg is None:
            raise KeyError(package_id)
        return benefit in pkg.benefits

    def grid(self) -> List[List[bool]]:
        """rows × columns presence flags."""
        return [[benefit in pkg.benefits for pkg in self.columns] for benefit in self.rows]

    @property
    def is_empty(self) -> bool:
        return not self.columns


def build_comparison(packages: Sequence[Package], selection: SelectionSet) -> ComparisonMatrix:
    """Columns follow catalog order, not the order in which they were picked."""
    return ComparisonMatrix(
        columns=tuple(p for p in packages if p.id in selection),
        rows=tuple(compute_benefit_rows(packages)),
    )


def render_comparison(matrix: ComparisonMatrix) -> str:
    """Markdown text for the comparison screen."""
    if matrix.is_empty:
        return "_Select up to 3 packages to compare._"

    lines: List[str] = []
    for pkg in matrix.columns:
        featured = " ⭐ _Featured_" if pkg.featured else ""
        lines.append(f"*{escape_md(pkg.name)}* — `{pkg.display_price}`{featured}")
    lines.append("")

    header = " | ".join(escape_md(pkg.name) for pkg in matrix.columns)
    lines.append(f"*Feature* — {header}")
    for benefit, flags in zip(matrix.rows, matrix.grid()):
        glyphs = " ".join(PRESENT_GLYPH if f else ABSENT_GLYPH for f in flags)
        lines.append(f"{glyphs}  {escape_md(benefit)}")
    return "\n".join(lines)
