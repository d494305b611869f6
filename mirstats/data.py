from __future__ import annotations

import logging
import os
from dataclasses import asdict, fields
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from mirstats.filters import ViewFilters, normalize_filters
from mirstats.models import COUNT_FIELDS, PERCENTAGE_FIELDS, UniversityRecord

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DATA_DIR_ENV = "MIR_DATA_DIR"
FILE_GLOBS = ("*.csv", "*.json", "*.xlsx")

SOURCE_COLUMNS = {
    "Universidad": "name",
    "Nombre": "name",
    "Abreviatura": "abbreviation",
    "Siglas": "abbreviation",
    "Año": "year",
    "Convocatoria": "year",
    "Admitidos": "admitted",
    "Presentados": "presented",
    "Superan Nota": "passed",
    "Superan Nota de Corte": "passed",
    "Plazas Adjudicadas": "places_awarded",
    "Plazas": "places_awarded",
    "% Presentados / Admitidos": "percentage_presented_over_admitted",
    "% Plazas / Presentados": "percentage_places_over_presented",
    "% Plazas / Superan Nota": "percentage_places_over_passed",
    "Sin Plaza": "without_place_absolute",
    "Ranking": "rank",
    # camelCase keys used by the JSON exports
    "placesAwarded": "places_awarded",
    "percentagePresentedOverAdmitted": "percentage_presented_over_admitted",
    "percentagePlacesOverPresented": "percentage_places_over_presented",
    "percentagePlacesOverPassed": "percentage_places_over_passed",
    "withoutPlaceAbsolute": "without_place_absolute",
}

RECORD_COLUMNS = [f.name for f in fields(UniversityRecord)]

# numerator, denominator
PERCENTAGE_SOURCES = {
    "percentage_presented_over_admitted": ("presented", "admitted"),
    "percentage_places_over_presented": ("places_awarded", "presented"),
    "percentage_places_over_passed": ("places_awarded", "passed"),
}


def data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else DEFAULT_DATA_DIR


def get_source_files(directory: Optional[Path] = None) -> List[Path]:
    directory = directory or data_dir()
    found: List[Path] = []
    for pattern in FILE_GLOBS:
        found.extend(directory.glob(pattern))
    return sorted(found)


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def drop_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.loc[:, ~df.columns.duplicated()]


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            df[col] = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
    return df


def percentage(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """numerator / denominator * 100, defined as 0 where the denominator is not positive."""
    out = numerator / denominator.where(denominator > 0) * 100
    return out.fillna(0.0)


def read_source_file(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".json":
        return pd.read_json(path, orient="records")
    if suffix == ".xlsx":
        return pd.read_excel(path)
    return pd.DataFrame()


def rename_source_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.rename(columns={c: SOURCE_COLUMNS.get(str(c).strip(), str(c).strip()) for c in df.columns})
    return drop_duplicate_columns(df)


def normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Map a raw source table onto the record columns.

    Percentages, the without-place count and the yearly rank are taken from
    the source when present and derived from the counts where missing.
    """
    if df.empty:
        return pd.DataFrame(columns=RECORD_COLUMNS)

    df = rename_source_columns(df).copy()
    if "name" not in df.columns or "year" not in df.columns:
        logger.warning("Source table has no university/year columns; columns=%s", list(df.columns))
        return pd.DataFrame(columns=RECORD_COLUMNS)

    df = coerce_str_safe(df, ["name", "abbreviation"])
    df = numericize(df, ["year", "rank", "without_place_absolute", *COUNT_FIELDS, *PERCENTAGE_FIELDS])
    df = df.dropna(subset=["name", "year"]).copy()
    df["year"] = df["year"].astype(int)

    if "abbreviation" not in df.columns:
        df["abbreviation"] = df["name"]
    df["abbreviation"] = df["abbreviation"].fillna(df["name"])

    for col in COUNT_FIELDS:
        if col not in df.columns:
            df[col] = 0
        df[col] = df[col].fillna(0).astype(int)

    dupes = df.duplicated(subset=["name", "year"], keep="last")
    if dupes.any():
        logger.warning("Dropping %d duplicate university-year rows (keeping the last one)", int(dupes.sum()))
        df = df[~dupes].copy()

    for col, (num, den) in PERCENTAGE_SOURCES.items():
        derived = percentage(df[num], df[den])
        df[col] = df[col].fillna(derived) if col in df.columns else derived

    derived_without_place = (df["presented"] - df["places_awarded"]).astype(float)
    if "without_place_absolute" in df.columns:
        df["without_place_absolute"] = df["without_place_absolute"].fillna(derived_without_place)
    else:
        df["without_place_absolute"] = derived_without_place

    derived_rank = df.groupby("year")["percentage_places_over_passed"].rank(method="min", ascending=False)
    df["rank"] = (df["rank"].fillna(derived_rank) if "rank" in df.columns else derived_rank).round().astype("Int64")

    clashes = df.duplicated(subset=["year", "abbreviation"], keep=False)
    if clashes.any():
        logger.warning(
            "Abbreviation shared by different universities in the same year: %s",
            sorted(df.loc[clashes, "abbreviation"].unique().tolist()),
        )

    return df.sort_values(["year", "name"], kind="stable")[RECORD_COLUMNS].reset_index(drop=True)


def frame_to_records(df: pd.DataFrame) -> Tuple[UniversityRecord, ...]:
    records: List[UniversityRecord] = []
    for row in df.to_dict(orient="records"):
        rank = row.get("rank")
        records.append(
            UniversityRecord(
                name=str(row["name"]),
                abbreviation=str(row["abbreviation"]),
                year=int(row["year"]),
                admitted=int(row["admitted"]),
                presented=int(row["presented"]),
                places_awarded=int(row["places_awarded"]),
                passed=int(row["passed"]),
                percentage_presented_over_admitted=float(row["percentage_presented_over_admitted"]),
                percentage_places_over_presented=float(row["percentage_places_over_presented"]),
                percentage_places_over_passed=float(row["percentage_places_over_passed"]),
                without_place_absolute=float(row["without_place_absolute"]),
                rank=None if pd.isna(rank) else int(rank),
            )
        )
    return tuple(records)


def records_to_frame(records: Sequence[UniversityRecord]) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    frames = []
    for path_str, _ in files_sig:
        try:
            frames.append(rename_source_columns(read_source_file(Path(path_str))))
        except Exception:
            logger.exception("Failed to read source file %s", path_str)
    raw = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    frame = normalize_frame(raw)
    records = frame_to_records(frame)
    return {
        "files": [Path(name).name for name, _ in files_sig],
        "years": sorted({r.year for r in records}),
        "universities": sorted({r.name for r in records}),
        "frame": frame,
        "records": records,
    }


def load_dashboard_data(directory: Optional[Path] = None) -> Dict[str, object]:
    files = get_source_files(directory)
    if not files:
        return {"files": [], "years": [], "universities": [], "frame": pd.DataFrame(columns=RECORD_COLUMNS), "records": ()}
    return _load_dashboard_data_cached(file_signature(files))


def prepare_context(filters: dict | ViewFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    records: Sequence[UniversityRecord] = data_ctx.get("records", ()) or ()
    all_years = list(data_ctx.get("years") or sorted({r.year for r in records}))
    universities = list(data_ctx.get("universities") or sorted({r.name for r in records}))
    filt = (
        filters
        if isinstance(filters, ViewFilters)
        else normalize_filters(filters, available_years=all_years, available_universities=universities)
    )

    position = {name: i for i, name in enumerate(filt.universities)}
    selected = [r for r in records if r.name in position]

    latest_for_year: Dict[str, UniversityRecord] = {}
    for r in selected:
        if r.year == filt.year:
            latest_for_year[r.name] = r
    comparison_records = [latest_for_year[name] for name in filt.universities if name in latest_for_year]
    evolution_records = sorted(selected, key=lambda r: (position[r.name], r.year))

    return {
        "filters": filt,
        "records": records,
        "all_years": all_years,
        "comparison_records": comparison_records,
        "evolution_records": evolution_records,
        "metrics": filt.metric_descriptors(),
    }
