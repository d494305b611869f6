from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from mirstats.charts import evolution_charts
from mirstats.evolution import first_year_with_data, relevant_years, shape_evolution
from mirstats.filters import ViewFilters
from mirstats.palette import DEFAULT_PALETTE, Palette


def compute_evolution(filters: ViewFilters, ctx: Dict[str, Any], *, palette: Palette = DEFAULT_PALETTE) -> Dict[str, Any]:
    records = list(ctx.get("evolution_records", []))
    metrics = list(ctx.get("metrics") or filters.metric_descriptors())
    all_years = list(ctx.get("all_years", []))

    entries = shape_evolution(records, metrics, all_years, palette=palette)
    return {
        "filters": asdict(filters),
        "years": relevant_years(all_years, first_year_with_data(records)),
        "entries": entries,
        "charts": evolution_charts(entries, palette),
    }
