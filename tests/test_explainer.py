import pytest

from cinemood.data import MediaItem, PreferenceProfile, as_rating_vector
from cinemood.recommendation import RecommendationExplainer


@pytest.fixture()
def explainer():
    return RecommendationExplainer()


def test_content_reasons_come_first(explainer):
    item = MediaItem(id="m1", genre="Crime, Drama", year=1994, rating=4.6, rating_count=120)
    preferences = PreferenceProfile(genres={"drama": 0.8, "crime": 0.0}, eras={"1990s": 0.5})
    similar = {"u1": as_rating_vector([("m1", 5)]), "u2": as_rating_vector([("m2", 4)])}

    explanation = explainer.explain_recommendation(item, preferences, similar)

    assert explanation.primary == "Similar to genres you enjoy: Drama"
    assert [d.type for d in explanation.details] == ["content", "collaborative", "popularity"]
    assert [f.type for f in explanation.details[0].factors] == ["genre", "era"]
    assert explanation.details[0].factors[1].description == "From the 1990s, a period you enjoy"
    assert explanation.details[1].factors[0].description == "Enjoyed by 1 users with similar taste"
    assert explanation.details[2].factors[0].description == "Rated 4.6/5 by 120 users"


def test_collaborative_reason_without_preferences(explainer):
    similar = {"u1": as_rating_vector([("m1", 5)]), "u2": as_rating_vector([("m1", 3)])}

    explanation = explainer.explain_recommendation(MediaItem(id="m1"), None, similar)

    assert explanation.primary == "Enjoyed by 2 users with similar taste"


def test_popularity_needs_more_than_ten_ratings(explainer):
    few = MediaItem(id="m1", rating=4.0, rating_count=10)
    many = MediaItem(id="m1", rating=4.04, rating_count=11)

    assert explainer.explain_recommendation(few).primary == "Based on your interests"
    assert explainer.explain_recommendation(many).primary == "Rated 4.0/5 by 11 users"


def test_nothing_matching_gives_default(explainer):
    item = MediaItem(id="m1", genre="Horror", year=2020)
    preferences = PreferenceProfile(genres={"comedy": 1.0}, eras={"1990s": 1.0})

    explanation = explainer.explain_recommendation(item, preferences, {"u1": as_rating_vector([("m2", 5)])})

    assert explanation.primary == "Based on your interests"
    assert explanation.details == []
    assert explanation.to_dict() == {"primary": "Based on your interests", "details": []}


def test_rating_count_read_from_camel_case():
    item = MediaItem.from_dict({"mediaId": 7, "rating": 3.5, "ratingCount": 40})

    assert item.rating_count == 40
