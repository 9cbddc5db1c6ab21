from unittest.mock import patch

import pytest
from flash_fake_query import FakeQuery

from .models import Article, Author
from .services import (
    articles_by_active_authors,
    count_articles_or_zero,
    delete_articles_above,
    list_published_articles,
)

pytestmark = pytest.mark.asyncio


class TestFakeQueryIntegration:
    """FakeQuery injected in place of a model's query factory."""

    async def test_supports_resolving_with_a_value(self):
        fake = FakeQuery()
        rows = [Article(id=1, title="Hello", published=True)]
        fake.resolves(rows)

        with patch.object(Article, "query", return_value=fake.builder):
            assert await list_published_articles(limit=5) is rows

    async def test_supports_rejection_with_a_reason(self):
        reason = RuntimeError("connection lost")
        fake = FakeQuery().rejects(reason)

        with (
            patch.object(Article, "query", return_value=fake.builder),
            pytest.raises(RuntimeError) as exc_info,
        ):
            await delete_articles_above(42)
        assert exc_info.value is reason

    async def test_tracks_query_builder_method_calls(self):
        fake = FakeQuery().resolves(3)

        with patch.object(Article, "query", return_value=fake.builder):
            assert await delete_articles_above(42) == 3

        assert fake.stub_names == ["delete", "where", "returning"]
        fake.stubs["delete"].assert_called_once_with()
        fake.stubs["delete"].assert_called_on(fake.builder)
        fake.stubs["where"].assert_called_once_with("id", ">", 42)
        fake.stubs["where"].assert_called_on(fake.builder)
        fake.stubs["returning"].assert_called_once_with("*")
        fake.stubs["returning"].assert_called_on(fake.builder)

    async def test_records_sqlalchemy_expressions(self):
        """SQLAlchemy clause arguments should be stored untouched."""
        fake = FakeQuery().resolves([])

        with patch.object(Article, "query", return_value=fake.builder):
            await list_published_articles(limit=10)

        assert fake.stub_names == ["where", "order_by", "limit"]
        (condition,) = fake.stubs["where"].calls[0].args
        assert condition.compare(Article.published.is_(True))
        (ordering,) = fake.stubs["order_by"].calls[0].args
        assert ordering.compare(Article.id.desc())
        fake.stubs["limit"].assert_called_once_with(10)

    async def test_nested_query_converted_to_statement(self):
        """A subquery builder should be converted and handed to the outer query."""
        authors = FakeQuery()
        articles = FakeQuery().resolves([])

        with (
            patch.object(Author, "query", return_value=authors.builder),
            patch.object(Article, "query", return_value=articles.builder),
        ):
            await articles_by_active_authors()

        assert authors.converted is True
        assert authors.stub_names == ["select", "where"]
        articles.stubs["where_in"].assert_called_once_with(
            "author_id", authors.statement
        )

    async def test_catch_recovers_from_rejection(self):
        fake = FakeQuery().rejects(TimeoutError("slow"))

        with patch.object(Article, "query", return_value=fake.builder):
            assert await count_articles_or_zero() == 0

        fake.stubs["count"].assert_called_once_with("id")
