from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ViewFiltersModel(BaseModel):
    year: Optional[int] = None
    universities: List[str] = Field(default_factory=list)
    metrics: List[str] = Field(default_factory=list)


class MetricModel(BaseModel):
    key: str
    label: str
    is_percentage: bool


class MetaMetricsResponse(BaseModel):
    metrics: List[MetricModel]
