import asyncio
import math

import pytest

from cinemood.config.settings import ExperimentConfig
from cinemood.experiments import ExperimentMetrics, VariantMetrics

from .fakes import FakeEventStore


def run(coro):
    return asyncio.run(coro)


def test_conversion_rate_is_zero_without_users():
    metrics = ExperimentMetrics(FakeEventStore(counts={("exp", "a"): (0, 0)}))

    assert run(metrics.calculate_conversion_rate("exp", "a")) == 0


def test_conversion_rate_divides_converted_by_total():
    metrics = ExperimentMetrics(FakeEventStore(counts={("exp", "a"): (4, 3)}))

    assert run(metrics.calculate_conversion_rate("exp", "a")) == pytest.approx(0.75)


def test_engagement_keeps_missing_averages_as_none():
    store = FakeEventStore(averages={("exp", "a"): (None, 2.5, 6)})
    engagement = run(ExperimentMetrics(store).calculate_engagement_metrics("exp", "a"))

    assert engagement.avg_time_spent is None
    assert engagement.avg_interactions == 2.5
    assert engagement.unique_users == 6


def test_all_metrics_merges_conversion_and_engagement():
    store = FakeEventStore(
        counts={("exp", "a"): (10, 2)},
        averages={("exp", "a"): (30.0, 4.0, 10)},
    )
    result = run(ExperimentMetrics(store).calculate_all_metrics("exp", "a"))

    assert result == VariantMetrics(
        conversion_rate=pytest.approx(0.2),
        avg_time_spent=30.0,
        avg_interactions=4.0,
        unique_users=10,
    )


def test_chi_square_against_mean_of_unique_users():
    assert ExperimentMetrics.calculate_chi_square([10, 20, 30]) == pytest.approx(10.0)


def test_chi_square_zero_expected_count():
    assert ExperimentMetrics.calculate_chi_square([0, 0, 0]) == 0.0
    assert ExperimentMetrics.calculate_chi_square([]) == 0.0


@pytest.mark.parametrize("k", [-1, 0, 1])
def test_cdf_degenerate_degrees_of_freedom_use_leading_term_only(k):
    assert ExperimentMetrics.chi_square_cdf(4.0, k) == pytest.approx(1 - math.exp(-2.0))


def test_cdf_matches_closed_form_for_k_two_and_three():
    x = 10.0
    t = x / 2
    assert ExperimentMetrics.chi_square_cdf(x, 2) == pytest.approx(1 - math.exp(-t) * (1 + t))
    assert ExperimentMetrics.chi_square_cdf(x, 3) == pytest.approx(
        1 - math.exp(-t) * (1 + t + t ** 2 / 2)
    )


def test_cdf_is_never_negative():
    assert ExperimentMetrics.chi_square_cdf(0.0, 5) == 0.0


def test_significance_for_three_variants():
    store = FakeEventStore(
        counts={("exp", v): (n, n // 2) for v, n in [("a", 10), ("b", 20), ("c", 30)]},
        averages={("exp", v): (None, None, n) for v, n in [("a", 10), ("b", 20), ("c", 30)]},
        variants={"exp": ["a", "b", "c"]},
    )
    result = run(ExperimentMetrics(store).get_statistical_significance("exp"))

    assert result.chi_square == pytest.approx(10.0)
    assert result.degrees_of_freedom == 2
    assert result.p_value == pytest.approx(6 * math.exp(-5))
    assert result.is_significant is True
    assert result.reliable is True
    assert set(result.variants) == {"a", "b", "c"}
    assert result.variants["b"].conversion_rate == pytest.approx(0.5)


def test_significance_respects_configured_level():
    store = FakeEventStore(
        averages={("exp", v): (None, None, n) for v, n in [("a", 10), ("b", 20), ("c", 30)]},
        variants={"exp": ["a", "b", "c"]},
    )
    metrics = ExperimentMetrics(store, config=ExperimentConfig(significance_level=0.01))

    assert run(metrics.get_statistical_significance("exp")).is_significant is False


def test_significance_with_balanced_variants_is_not_significant():
    store = FakeEventStore(
        averages={("exp", "a"): (None, None, 50), ("exp", "b"): (None, None, 50)},
        variants={"exp": ["a", "b"]},
    )
    result = run(ExperimentMetrics(store).get_statistical_significance("exp"))

    assert result.chi_square == 0.0
    assert result.p_value == pytest.approx(1.0)
    assert result.is_significant is False


def test_significance_single_variant_does_not_error():
    store = FakeEventStore(
        averages={("exp", "a"): (None, None, 12)},
        variants={"exp": ["a"]},
    )
    result = run(ExperimentMetrics(store).get_statistical_significance("exp"))

    assert result.degrees_of_freedom == 0
    assert result.chi_square == 0.0
    assert result.is_significant is False
    assert result.reliable is False


def test_significance_without_variants():
    result = run(ExperimentMetrics(FakeEventStore()).get_statistical_significance("exp"))

    assert result.chi_square == 0.0
    assert result.variants == {}
    assert result.is_significant is False


def test_store_errors_propagate():
    class BrokenStore(FakeEventStore):
        async def distinct_variants(self, experiment_name):
            raise ConnectionError("store offline")

    with pytest.raises(ConnectionError):
        run(ExperimentMetrics(BrokenStore()).get_statistical_significance("exp"))
