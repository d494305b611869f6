from __future__ import annotations

import math
from typing import Iterable, Tuple

FULL_DOMAIN: Tuple[float, float] = (0, 100)
ZOOM_THRESHOLD = 50
ZOOM_MARGIN = 10
ZOOM_STEP = 5


def compute_domain(values: Iterable[float]) -> Tuple[float, float]:
    """Axis domain for a set of percentages.

    Exam ratios cluster around 80-100%, so when every value is at least 50 the
    axis is zoomed to start 10 points below the minimum, snapped down to a
    multiple of 5. Anything lower keeps the full 0-100 range.
    """
    values = list(values)
    if not values:
        return FULL_DOMAIN
    lowest = min(values)
    if lowest < ZOOM_THRESHOLD:
        return FULL_DOMAIN
    domain_min = math.floor((lowest - ZOOM_MARGIN) / ZOOM_STEP) * ZOOM_STEP
    return (max(0, domain_min), 100)
