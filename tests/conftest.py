import pytest

from cinemood.data.schemas import MediaItem

from .fakes import FakeTextAnalyzer


@pytest.fixture()
def text_analyzer():
    return FakeTextAnalyzer()


@pytest.fixture()
def catalogue():
    return [
        MediaItem(id=1, title="The Shawshank Redemption", year=1994, genre="Crime, Drama",
                  description="Two imprisoned men bond over a number of years.", rating=4.6),
        MediaItem(id=2, title="Paddington 2", year=2017, genre="Comedy, Family",
                  description="A heartwarming tale of a bear in London.", rating=4.2),
        MediaItem(id=3, title="Mad Max: Fury Road", year=2015, genre=["Action", "Adventure"],
                  description="An epic chase across the desert.", rating=4.1),
        MediaItem(id=4, title="Planet Earth", year=2006, genre="Documentary",
                  description="A calm look at the natural world.", rating=4.8),
        MediaItem(id=5, title="Untitled"),
    ]
