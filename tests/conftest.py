"""
Shared test fixtures and helpers for the Resourcery test suite.
"""

import logging

import pytest

from resourcery import ResourceConfig, configure, get_config

# Inflections must be in place before any resource type is derived
BASE_CONFIG = ResourceConfig(
    inflections={
        "uncountable": ["preferences"],
        "irregular": {"numero_telefone": "numeros_telefone"},
    },
)
configure(BASE_CONFIG)

from fixtures import api_v2, api_v8, my_api, my_module  # noqa: E402,F401
from fixtures import resources  # noqa: E402,F401
from fixtures.models import (  # noqa: E402
    Book,
    BookComment,
    Boat,
    Car,
    Cat,
    Comment,
    Document,
    HairCut,
    Person,
    Picture,
    Post,
    Preferences,
    Product,
    Section,
    Tag,
    reset_records,
)


# ============================================================================
# Config
# ============================================================================


@pytest.fixture(autouse=True)
def restore_config():
    """Put the suite-wide configuration back after each test."""
    saved = get_config()
    yield
    if get_config() is not saved:
        configure(saved)


# ============================================================================
# Records
# ============================================================================


class Seed:
    """Handles on the seeded records."""


@pytest.fixture
def seed():
    """
    Fresh in-memory store:

    - joe (person 1) with preferences and a hair cut, owns a car and a boat
    - post 1 "New post" by joe, tags 1 and 2, comments 1 and 2
    - post 2 "JR Solves your serialization woes!" with no author
    - tags 1..4, section 1, cats 1..2, book 1 with an approved and a
      pending comment, picture 1 of document 1, product 1
    """
    reset_records()
    s = Seed()

    s.preferences = Preferences.create(advanced_mode=False)
    s.hair_cut = HairCut.create(style="mohawk")
    s.joe = Person.create(
        name="Joe Author",
        email="joe@xyz.fake",
        date_joined="2013-08-07 20:25:00",
        preferences_id=s.preferences.id,
        hair_cut_id=s.hair_cut.id,
    )
    s.fred = Person.create(name="Fred Reader", email="fred@xyz.fake")

    s.car = Car.create(make="Mazda", serial_number="32432adfsfdysua")
    s.boat = Boat.create(make="Chris-Craft", serial_number="434253JJJSD")
    s.joe.vehicles.extend([s.car, s.boat])

    s.tags = [Tag.create(name=name) for name in ("short", "whiny", "happy", "silly")]
    s.section = Section.create(name="javascript")

    s.post = Post.create(title="New post", body="A body!!!", author_id=s.joe.id)
    s.post.tag_ids = [s.tags[0].id, s.tags[1].id]
    s.other_post = Post.create(title="JR Solves your serialization woes!", body="Use JR")

    s.comments = [
        Comment.create(body="what a dumb post", post_id=s.post.id, author_id=s.fred.id),
        Comment.create(body="i liked it", post_id=s.post.id, author_id=s.joe.id),
    ]
    s.post.comment_ids = [comment.id for comment in s.comments]
    s.joe.posts.append(s.post)

    s.mother = Cat.create(name="Tabby", breed="tabby")
    s.kitten = Cat.create(name="Tom", breed="tabby", mother_id=s.mother.id)

    s.book = Book.create(title="Book 1", isbn="12345-1", banned=False)
    s.approved_comment = BookComment.create(body="good read", approved=True, book_id=s.book.id)
    s.pending_comment = BookComment.create(body="spam", approved=False, book_id=s.book.id)
    s.book.book_comments.extend([s.approved_comment, s.pending_comment])

    s.document = Document.create(name="Resume")
    s.product = Product.create(name="Widget")
    s.picture = Picture.create(name="headshot", imageable_id=s.document.id, imageable_type="Document")

    yield s
    reset_records()


@pytest.fixture
def log_warnings(caplog):
    caplog.set_level(logging.WARNING, logger="resourcery")
    return caplog
