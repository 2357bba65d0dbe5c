from cinemood.data import MediaItem
from cinemood.recommendation import build_user_profile, extract_features
from cinemood.recommendation.features import extract_title_keywords


def test_extract_features_for_classic_title():
    item = MediaItem(id=1, year=1994, genre="Crime, Drama", title="The Shawshank Redemption")

    assert extract_features(item) == {
        "decade_1990s",
        "genre_crime",
        "genre_drama",
        "keyword_shawshank",
        "keyword_redemption",
    }


def test_genre_list_is_accepted():
    item = MediaItem(id=2, genre=["Sci-Fi", " Thriller "])

    assert extract_features(item) == {"genre_sci-fi", "genre_thriller"}


def test_missing_fields_produce_no_tags():
    assert extract_features(MediaItem(id=3)) == set()


def test_title_keywords_drop_punctuation_stop_words_and_short_words():
    assert extract_title_keywords("Spider-Man: No Way Home") == ["spiderman", "way", "home"]
    assert extract_title_keywords("Up") == []


def test_string_year_is_bucketed_by_decade():
    assert "decade_2000s" in extract_features(MediaItem(id=4, year="2009"))


def test_build_user_profile_accumulates_ratings():
    profile = build_user_profile([
        (MediaItem(id=1, year=1994, genre="Drama"), 4.0),
        (MediaItem(id=2, year=1999, genre="Drama, Comedy"), None),
    ])

    assert profile == {
        "decade_1990s": 5.0,
        "genre_drama": 5.0,
        "genre_comedy": 1.0,
    }
