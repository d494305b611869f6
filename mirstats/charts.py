from __future__ import annotations

from typing import Any, Dict, List, Sequence

import altair as alt
import pandas as pd

from mirstats.models import AUTO_DOMAIN, METRICS_BY_KEY
from mirstats.palette import DEFAULT_PALETTE, WITHOUT_PLACE_COLOR, Palette

alt.data_transformers.disable_max_rows()

ABSOLUTE_LABELS = {"admitted": "Admitidos", "presented": "Presentados", "places_awarded": "Plazas Adjudicadas"}


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _scale(domain, **kwargs) -> alt.Scale:
    if tuple(domain) == AUTO_DOMAIN:
        return alt.Scale(**kwargs)
    return alt.Scale(domain=list(domain), **kwargs)


def _color_scale(abbreviations: Sequence[str], palette: Palette) -> alt.Scale:
    return alt.Scale(domain=list(abbreviations), range=[palette.color(i) for i in range(len(abbreviations))])


def _identity_tooltips() -> List[alt.Tooltip]:
    return [
        alt.Tooltip("full_name:N", title="Universidad"),
        alt.Tooltip("abbreviation:N", title="Siglas"),
        alt.Tooltip("rank:Q", title="Ranking"),
    ]


def absolute_chart(rows: List[Dict[str, Any]], palette: Palette = DEFAULT_PALETTE) -> alt.Chart:
    order = [r["abbreviation"] for r in rows]
    long_df = pd.DataFrame(rows).melt(
        id_vars=["abbreviation", "full_name", "rank"],
        value_vars=list(ABSOLUTE_LABELS),
        var_name="field",
        value_name="count",
    )
    long_df["metric"] = long_df["field"].map(ABSOLUTE_LABELS)
    return (
        alt.Chart(long_df, title="Cifras Absolutas: Admisión y Plazas")
        .mark_bar()
        .encode(
            x=alt.X("abbreviation:N", title=None, sort=order),
            xOffset=alt.XOffset("metric:N", sort=list(ABSOLUTE_LABELS.values())),
            y=alt.Y("count:Q", title=None, axis=alt.Axis(gridDash=[3, 3])),
            color=alt.Color(
                "metric:N",
                title=None,
                sort=list(ABSOLUTE_LABELS.values()),
                scale=alt.Scale(domain=list(ABSOLUTE_LABELS.values()), range=list(palette.colors[:3])),
            ),
            tooltip=_identity_tooltips() + [alt.Tooltip("metric:N", title="Métrica"), alt.Tooltip("count:Q", format=",")],
        )
    )


def rank_chart(rows: List[Dict[str, Any]], palette: Palette = DEFAULT_PALETTE) -> alt.Chart:
    order = [r["abbreviation"] for r in rows]
    return (
        alt.Chart(pd.DataFrame(rows), title="Ranking Nacional (% Plazas / Sup. Nota)")
        .mark_bar()
        .encode(
            x=alt.X("abbreviation:N", title=None, sort=order),
            y=alt.Y("rank:Q", title="Posición", scale=alt.Scale(reverse=True, domainMin=1)),
            color=alt.Color("abbreviation:N", scale=_color_scale(order, palette), legend=None),
            tooltip=_identity_tooltips(),
        )
    )


def percentage_chart(
    rows: List[Dict[str, Any]],
    field: str,
    title: str,
    domain,
    palette: Palette = DEFAULT_PALETTE,
) -> alt.Chart:
    """Horizontal bars, one per university, on the zoomed percentage axis."""
    order = [r["abbreviation"] for r in rows]
    return (
        alt.Chart(pd.DataFrame(rows), title=title)
        .mark_bar()
        .encode(
            x=alt.X(f"{field}:Q", title="%", scale=_scale(domain, clamp=True)),
            y=alt.Y("abbreviation:N", title=None, sort=order),
            color=alt.Color("abbreviation:N", scale=_color_scale(order, palette), legend=None),
            tooltip=_identity_tooltips() + [alt.Tooltip(f"{field}:Q", title=title, format=".2f")],
        )
    )


def comparison_charts(view: Dict[str, Any], palette: Palette = DEFAULT_PALETTE) -> Dict[str, Any]:
    if not view.get("absolute"):
        return {}
    charts: Dict[str, Any] = {
        "absolute": to_vega_spec(absolute_chart(view["absolute"], palette)),
        "rank": to_vega_spec(rank_chart(view["rank"], palette)),
    }
    for field, rows in view["percentages"].items():
        charts[field] = to_vega_spec(
            percentage_chart(rows, "value", METRICS_BY_KEY[field].label, view["domains"][field], palette)
        )

    without_place = view["without_place"]
    absolute_without_place = (
        alt.Chart(pd.DataFrame(without_place), title="Alumnos Sin Plaza (Absoluto)")
        .mark_bar(color=WITHOUT_PLACE_COLOR)
        .encode(
            x=alt.X("abbreviation:N", title=None, sort=[r["abbreviation"] for r in without_place]),
            y=alt.Y("without_place_absolute:Q", title=None),
            tooltip=_identity_tooltips() + [alt.Tooltip("without_place_absolute:Q", title="Sin Plaza", format=",")],
        )
    )
    charts["without_place_absolute"] = to_vega_spec(absolute_without_place)
    charts["without_place_percent"] = to_vega_spec(
        percentage_chart(
            without_place,
            "without_place_percent",
            "% Sin Plaza sobre los Presentados",
            view["domains"]["without_place_percent"],
            palette,
        )
    )
    return charts


def evolution_chart(entry: Dict[str, Any], palette: Palette = DEFAULT_PALETTE) -> alt.Chart:
    """Line per university over the year axis; missing years stay as gaps."""
    metric = entry["metric"]
    abbreviations = [u["abbreviation"] for u in entry["universities"]]
    long_rows = [
        {"year": row["year"], "university": abbr, "value": row.get(abbr), "rank": row.get(f"{abbr}_rank")}
        for row in entry["series"]
        for abbr in abbreviations
    ]
    long_df = pd.DataFrame(long_rows, columns=["year", "university", "value", "rank"])

    is_rank = metric["key"] == "rank"
    if is_rank:
        y_scale = alt.Scale(reverse=True, domainMin=1)
    else:
        y_scale = _scale(entry["domain"])

    hover = alt.selection_point(fields=["university"], on="mouseover", empty="all")
    return (
        alt.Chart(long_df, title=metric["label"])
        .mark_line(point={"filled": True}, invalid="break-paths-filter-domains")
        .encode(
            x=alt.X("year:O", title="Año"),
            y=alt.Y("value:Q", title="Posición" if is_rank else None, scale=y_scale),
            color=alt.Color("university:N", title=None, scale=_color_scale(abbreviations, palette)),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=[
                alt.Tooltip("year:O", title="Año"),
                alt.Tooltip("university:N", title="Universidad"),
                alt.Tooltip("value:Q", title=metric["label"], format=",.2f"),
                alt.Tooltip("rank:Q", title="Ranking"),
            ],
        )
        .add_params(hover)
    )


def evolution_charts(entries: List[Dict[str, Any]], palette: Palette = DEFAULT_PALETTE) -> Dict[str, Any]:
    return {e["metric"]["key"]: to_vega_spec(evolution_chart(e, palette)) for e in entries if e["has_data"]}
