from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence


class PivotRows:
    """Long-to-wide row builder.

    One row per index value (e.g. year), one cell per column (e.g. university
    abbreviation) plus ``<column>_<annotation>`` cells. Every cell starts as
    ``None`` so a missing observation stays visible as a gap instead of
    disappearing from the row.

    Column names must not collide with the index field or with another
    column's annotation key (an abbreviation ``"year"`` or ``"A_rank"``);
    that raises ``ValueError`` rather than silently overwriting cells.
    """

    def __init__(self, index_field: str, columns: Sequence[str], annotations: Iterable[str] = ("rank",)) -> None:
        self.index_field = index_field
        self.columns: List[str] = list(dict.fromkeys(columns))
        self.annotations: List[str] = list(annotations)
        self._rows: Dict[Any, Dict[str, Any]] = {}

        reserved = {index_field} | {self.annotation_key(c, a) for c in self.columns for a in self.annotations}
        clashing = [c for c in self.columns if c in reserved]
        if clashing:
            raise ValueError(f"Pivot columns clash with the index or annotation keys: {clashing}")

    def annotation_key(self, column: str, annotation: str) -> str:
        return f"{column}_{annotation}"

    def row(self, index_value: Any) -> Dict[str, Any]:
        existing = self._rows.get(index_value)
        if existing is not None:
            return existing
        new_row: Dict[str, Any] = {self.index_field: index_value}
        for column in self.columns:
            new_row[column] = None
            for annotation in self.annotations:
                new_row[self.annotation_key(column, annotation)] = None
        self._rows[index_value] = new_row
        return new_row

    def set(self, index_value: Any, column: str, value: Optional[Any], **annotations: Optional[Any]) -> None:
        if column not in self.columns:
            raise KeyError(f"Unknown pivot column: {column}")
        target = self.row(index_value)
        target[column] = value
        for annotation, annotation_value in annotations.items():
            target[self.annotation_key(column, annotation)] = annotation_value

    def has_values(self) -> bool:
        return any(row[column] is not None for row in self._rows.values() for column in self.columns)

    def to_records(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._rows.values()]
