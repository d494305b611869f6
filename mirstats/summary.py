"""Prompt payload for the external text-generation step.

Only a condensed subset of each record is sent, to keep the prompt short.
The model call itself happens outside this package.
"""

from __future__ import annotations

import json
from textwrap import dedent
from typing import Any, Dict, List, Literal, Optional, Sequence

from mirstats.models import MetricDescriptor, UniversityRecord

ViewMode = Literal["comparison", "evolution"]

PROJECTION_FIELDS = (
    "universidad",
    "año",
    "admitidos",
    "presentados",
    "plazas_adjudicadas",
    "plazas_/_presentados_%",
    "alumnos_sin_plaza",
)

_PREAMBLE = "Eres un analista de datos experto en educación médica superior en España."
_CLOSING = (
    "Usa un tono formal y objetivo. No inventes datos que no estén presentes. "
    "La respuesta debe ser un texto plano con formato de lista."
)


def summary_projection(records: Sequence[UniversityRecord]) -> List[Dict[str, Any]]:
    return [
        {
            "universidad": r.abbreviation,
            "año": r.year,
            "admitidos": r.admitted,
            "presentados": r.presented,
            "plazas_adjudicadas": r.places_awarded,
            "plazas_/_presentados_%": f"{r.percentage_places_over_presented:.2f}",
            "alumnos_sin_plaza": r.without_place_absolute,
        }
        for r in records
    ]


def build_summary_prompt(
    view_mode: ViewMode,
    records: Sequence[UniversityRecord],
    *,
    year: Optional[int] = None,
    metrics: Optional[Sequence[MetricDescriptor]] = None,
) -> Optional[str]:
    if view_mode not in ("comparison", "evolution"):
        raise ValueError(f"Unknown view mode: {view_mode}")
    if not records:
        return None

    names = ", ".join(dict.fromkeys(r.name for r in records))
    data = json.dumps(summary_projection(records), indent=2, ensure_ascii=False)

    if view_mode == "comparison":
        task = (
            f"Analiza los siguientes datos de rendimiento en el examen MIR para el año {year} "
            f"de las universidades: {names}.\n"
            "Proporciona un resumen conciso y claro en 2 o 3 puntos clave (usando guiones o asteriscos para listas), "
            "destacando los aspectos más relevantes de la comparación.\n"
            "Céntrate en las métricas clave como el porcentaje de plazas adjudicadas sobre los presentados "
            "y el número de alumnos que se quedan sin plaza."
        )
    else:
        labels = ", ".join(m.label for m in metrics) if metrics else "seleccionadas"
        task = (
            f"Analiza la evolución anual para las siguientes universidades: {names}, "
            f"en estas métricas de rendimiento del examen MIR: {labels}.\n"
            "Proporciona un resumen conciso y claro en 2 o 3 puntos clave (usando guiones o asteriscos para listas), "
            "identificando las tendencias más significativas (positivas o negativas) a lo largo del tiempo "
            "para estas universidades."
        )

    return dedent(
        """\
        {preamble}
        {task}
        {closing}

        Datos (en formato JSON):
        """
    ).format(preamble=_PREAMBLE, task=task, closing=_CLOSING) + data
