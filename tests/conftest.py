"""Shared fixtures: a small programming-book catalogue."""

import pytest

from devshelf.models import BookRecord


def make_book(book_id, title, **fields):
    return BookRecord(book_id=book_id, title=title, **fields)


@pytest.fixture
def books():
    return [
        make_book(
            1,
            "Learning Python",
            author="Mark Lutz",
            description="An introduction to the Python language",
            category="Programming",
            prog_lang="Python",
            tags=["beginner", "py"],
            rating=4.5,
        ),
        make_book(
            2,
            "Fluent Python",
            author="Luciano Ramalho",
            description="Effective Python programming",
            category="Programming",
            prog_lang="Python",
            tags=["advanced", "python"],
            rating=4.8,
        ),
        make_book(
            3,
            "Eloquent JavaScript",
            author="Marijn Haverbeke",
            description="A modern introduction to the web",
            category="Web",
            prog_lang="JavaScript",
            tags=["JS", "web"],
            rating=4.4,
        ),
        make_book(
            4,
            "You Don't Know JS",
            author="Kyle Simpson",
            description="Scope and closures in depth",
            category="Web",
            prog_lang="JavaScript",
            tags=["Javascript", "web"],
            rating=4.6,
        ),
        make_book(
            5,
            "The Art of Computer Programming",
            author="Knuth",
            category="Algorithms",
            prog_lang="C",
            tags=["algorithms"],
            rating=4.9,
        ),
        make_book(
            6,
            "Concrete Mathematics",
            author="Knuth",
            category="Algorithms",
            prog_lang="Pascal",
            tags=["algorithms", "math"],
            rating=4.7,
        ),
        make_book(7, None, tags=[None, " "]),
    ]


@pytest.fixture
def books_by_id(books):
    return {book.book_id: book for book in books}
