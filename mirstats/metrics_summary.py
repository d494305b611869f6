from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from mirstats.filters import ViewFilters
from mirstats.summary import ViewMode, build_summary_prompt, summary_projection


def compute_summary(filters: ViewFilters, ctx: Dict[str, Any], *, view_mode: ViewMode = "comparison") -> Dict[str, Any]:
    if view_mode == "comparison":
        records = list(ctx.get("comparison_records", []))
    else:
        records = list(ctx.get("evolution_records", []))
    metrics = list(ctx.get("metrics") or filters.metric_descriptors())
    return {
        "filters": asdict(filters),
        "view_mode": view_mode,
        "projection": summary_projection(records),
        "prompt": build_summary_prompt(view_mode, records, year=filters.year, metrics=metrics),
    }
