import math

import pytest

from cinemood.config.settings import RecommendationConfig
from cinemood.data import RatingEntry, as_rating_vector
from cinemood.recommendation import SimilarityCalculator


@pytest.fixture()
def calculator():
    return SimilarityCalculator()


def test_self_similarity_is_one(calculator):
    vector = as_rating_vector([("m1", 1), ("m2", 2), ("m3", 3)])

    assert calculator.cosine_similarity(vector, vector) == pytest.approx(1.0)


def test_similarity_is_symmetric(calculator):
    a = as_rating_vector([("m1", 5), ("m2", 3), ("m4", 1)])
    b = as_rating_vector([("m2", 4), ("m1", 2), ("m3", 5)])

    assert calculator.cosine_similarity(a, b) == calculator.cosine_similarity(b, a)


def test_disjoint_vectors_are_unrelated(calculator):
    a = as_rating_vector([("m1", 5)])
    b = as_rating_vector([("m2", 5)])

    assert calculator.cosine_similarity(a, b) == 0


def test_zero_norm_vector_gives_zero(calculator):
    a = as_rating_vector([("m1", 0), ("m2", 0)])
    b = as_rating_vector([("m1", 3)])

    assert calculator.cosine_similarity(a, b) == 0
    assert calculator.cosine_similarity([], b) == 0


def test_norms_cover_the_full_vectors(calculator):
    a = [RatingEntry("m1", 1.0), RatingEntry("m2", 1.0)]
    b = [RatingEntry("m1", 1.0)]

    assert calculator.cosine_similarity(a, b) == pytest.approx(1 / math.sqrt(2))


def test_find_similar_users_ranks_and_limits(calculator):
    target = as_rating_vector([("m1", 5), ("m2", 1)])
    others = {
        "twin": as_rating_vector([("m1", 5), ("m2", 1)]),
        "stranger": as_rating_vector([("m9", 4)]),
        "partial": as_rating_vector([("m1", 4), ("m3", 4)]),
    }

    ranked = calculator.find_similar_users(target, others, limit=2)

    assert [u.user_id for u in ranked] == ["twin", "partial"]
    assert ranked[0].similarity == pytest.approx(1.0)


def test_find_similar_users_rejects_bad_limit(calculator):
    with pytest.raises(ValueError):
        calculator.find_similar_users([], {}, limit=0)


def test_find_similar_users_defaults_to_configured_limit():
    calculator = SimilarityCalculator(RecommendationConfig(similar_users_limit=2))
    target = as_rating_vector([("m1", 5)])
    others = {f"u{i}": as_rating_vector([("m1", i + 1)]) for i in range(6)}

    assert len(calculator.find_similar_users(target, others)) == 2
    assert len(SimilarityCalculator().find_similar_users(target, others)) == 5
