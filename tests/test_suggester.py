import pytest

from devshelf.indexers import InvertedIndex
from devshelf.suggester import Suggester


@pytest.fixture
def suggester(books):
    return Suggester.build(books, InvertedIndex.build(books).terms())


def test_single_edit_typo_is_corrected(suggester):
    assert suggester.suggest_similar("pyton") == "python"
    assert suggester.suggest_similar("PYTON ") == "python"


def test_unrelated_query_has_no_suggestion(suggester):
    assert suggester.suggest_similar("zzzqqq") is None


@pytest.mark.parametrize("query", ["", "   ", "a", "x", "?"])
def test_empty_and_tiny_queries_do_not_raise(suggester, query):
    assert suggester.suggest_similar(query) is None


def test_whole_title_match(suggester):
    assert suggester.suggest_similar("fluent pyton") == "fluent python"
    assert suggester.suggest_similar("concrete mathematcs") == "concrete mathematics"


def test_multi_word_query_corrected_term_by_term(suggester):
    assert suggester.suggest_similar("pyton programing") == "python programming"


def test_multi_word_query_with_unknown_term(suggester):
    assert suggester.suggest_similar("pyton zzzqqq") is None


def test_vocabulary_excludes_short_terms_and_stopwords(suggester):
    assert "py" not in suggester.terms
    assert "the" not in suggester.terms
    assert "python" in suggester.terms
    assert "learning python" in suggester.titles


def test_threshold_scales_with_query_length():
    suggester = Suggester(titles=[], terms=["python", "programming"])
    assert suggester.max_distance("pyton") == 1
    assert suggester.max_distance("programming") == 3
    assert suggester.suggest_similar("porgramming") == "programming"
    assert suggester.suggest_similar("pyotn") is None
    assert suggester.suggest_similar("pyn") is None


def test_ties_resolve_alphabetically():
    suggester = Suggester(titles=[], terms=["cat", "bat"])
    assert suggester.suggest_similar("hat") == "bat"


def test_empty_vocabulary():
    assert Suggester(titles=[], terms=[]).suggest_similar("python") is None


def test_query_identical_to_a_title_is_not_suggested_back():
    suggester = Suggester(titles=["it", "python"], terms=["python"])
    assert suggester.suggest_similar("it") is None
    assert suggester.suggest_similar("IT ") is None
