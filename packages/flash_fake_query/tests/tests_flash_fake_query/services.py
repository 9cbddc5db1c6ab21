"""Application-style query code exercised against fake builders."""

from .models import Article, Author


async def list_published_articles(limit: int = 10):
    return await (
        Article.query()
        .where(Article.published.is_(True))
        .order_by(Article.id.desc())
        .limit(limit)
    )


async def delete_articles_above(article_id: int):
    return await Article.query().delete().where("id", ">", article_id).returning("*")


async def articles_by_active_authors():
    authors = Author.query().select("id").where(Author.active.is_(True)).to_statement()
    return await Article.query().where_in("author_id", authors)


async def count_articles_or_zero():
    def on_error(exc: Exception) -> int:
        return 0

    return await Article.query().count("id").catch(on_error)
