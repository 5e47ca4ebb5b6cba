#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from typing import Callable

# Local ----------------------------------------------------------------------------------------------------------------
from recordify.record import Association, Record
from recordify.schema import Schema


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def user_schema() -> Schema:
    """User schema with plain attributes, two to-one and one to-many association."""
    return Schema({
        "id": "integer",
        "name": "string",
        "profile": {"model": "Profile"},
        "address": {"model": "Address"},
        "posts": {"collection": "Post", "via": "author"},
    }, identity="user")


@pytest.fixture
def make_posts() -> Callable[..., list[Record]]:
    """Factory of plain post records with the given ids."""

    def _make(*ids: int) -> list[Record]:
        return [Record(id=i, title=f"post {i}", tags=["t"]) for i in ids]

    return _make


@pytest.fixture
def make_user(user_schema, make_posts) -> Callable[..., Record]:
    """Factory of a fully populated user record with optional display options."""

    def _make(properties=None, post_ids=(101, 102)) -> Record:
        return user_schema.new(
            {
                "id": 1,
                "name": "a",
                "profile": Record(bio="hello", links={"site": "x"}),
                "address": Record(city="Paris"),
                "meta": {"roles": ["admin"]},
            },
            associations={
                "profile": None,
                "address": None,
                "posts": Association(make_posts(*post_ids)),
            },
            properties=properties,
        )

    return _make
