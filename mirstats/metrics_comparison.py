from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from mirstats.charts import comparison_charts
from mirstats.comparison import shape_comparison
from mirstats.filters import ViewFilters
from mirstats.palette import DEFAULT_PALETTE, Palette


def compute_comparison(filters: ViewFilters, ctx: Dict[str, Any], *, palette: Palette = DEFAULT_PALETTE) -> Dict[str, Any]:
    records = list(ctx.get("comparison_records", []))
    if not records:
        return {"filters": asdict(filters), "year": filters.year, "universities": [], "series": {}, "charts": {}}

    view = shape_comparison(records, palette=palette)
    return {
        "filters": asdict(filters),
        "year": view["year"],
        "universities": [
            {"name": r.name, "abbreviation": r.abbreviation, "color": palette.color(i)} for i, r in enumerate(records)
        ],
        "series": view,
        "charts": comparison_charts(view, palette),
    }
