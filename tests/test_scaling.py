import pytest

from mirstats.scaling import compute_domain


def test_empty_values_use_full_range():
    assert compute_domain([]) == (0, 100)


@pytest.mark.parametrize("values", [[10, 80], [49.99, 99], [0], [-5, 100]])
def test_any_value_below_fifty_keeps_full_range(values):
    assert compute_domain(values) == (0, 100)


def test_high_values_zoom_to_multiple_of_five():
    assert compute_domain([87.3, 95.0, 99.1]) == (75, 100)
    assert compute_domain([90]) == (80, 100)
    assert compute_domain([50]) == (40, 100)


@pytest.mark.parametrize("values", [[50], [61.2, 70], [83.33, 99.9], [100], [72.5, 72.5]])
def test_zoomed_domain_properties(values):
    lo, hi = compute_domain(values)
    assert hi == 100
    assert lo >= 0
    assert lo % 5 == 0
    assert lo <= min(values) - 10


def test_accepts_generators():
    assert compute_domain(v for v in (91.0, 96.0)) == (80, 100)
