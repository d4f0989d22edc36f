"""Filtering, sorting and pagination over merged articles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .i18n import I18nResolver, get_i18n_text
from .summary import markdown_to_summary
from .utils import sort_key_date

SORT_ORDERS = ("date-desc", "date-asc", "title-asc", "title-desc")
SEARCH_SUMMARY_LENGTH = 100

Article = Dict[str, Any]
PageSize = Union[int, str]


@dataclass(slots=True)
class Pagination:
    current_page: int
    total_pages: int
    page_size: int
    total_items: int
    has_next: bool
    has_prev: bool


@dataclass(slots=True)
class AdjacentArticles:
    prev: Optional[Article] = None
    next: Optional[Article] = None


def _text(value: Any, lang: str, i18n: Optional[I18nResolver]) -> str:
    return get_i18n_text(value, lang, resolver=i18n)


def filter_articles(
    articles: Sequence[Article],
    lang: str,
    categories: Sequence[str] = (),
    query: str = "",
    sort_by: str = "date-desc",
    i18n: Optional[I18nResolver] = None,
) -> List[Article]:
    """Filter by category and search text, then sort.

    Args:
        articles: Merged article entries
        lang: Language used for text matching and title sorting
        categories: Keep articles in any of these categories (all when empty)
        query: Case-insensitive text matched against title, summary and content
        sort_by: One of ``SORT_ORDERS``; unknown values keep the input order
        i18n: Resolver for I18nText fields

    Returns:
        New list of matching articles
    """
    filtered = list(articles)

    if categories:
        wanted = set(categories)
        filtered = [article for article in filtered if wanted.intersection(article.get("categories") or [])]

    needle = query.strip().lower()
    if needle:

        def matches(article: Article) -> bool:
            title = _text(article.get("title"), lang, i18n).lower()
            content = _text(article.get("content"), lang, i18n).lower()
            summary = _text(article.get("summary"), lang, i18n).lower() or markdown_to_summary(
                content, SEARCH_SUMMARY_LENGTH
            )
            return needle in title or needle in summary or needle in content

        filtered = [article for article in filtered if matches(article)]

    if sort_by == "date-desc":
        filtered.sort(key=sort_key_date, reverse=True)
    elif sort_by == "date-asc":
        filtered.sort(key=sort_key_date)
    elif sort_by in ("title-asc", "title-desc"):
        filtered.sort(key=lambda article: _text(article.get("title"), lang, i18n).casefold(), reverse=sort_by == "title-desc")

    return filtered


def calculate_pagination(total_items: int, current_page: int, page_size: PageSize) -> Pagination:
    """Page numbers for ``total_items``; ``page_size="all"`` yields one page."""
    if page_size == "all":
        return Pagination(1, 1, total_items, total_items, False, False)

    size = int(page_size)
    if size <= 0:
        raise ValueError(f"page_size must be positive, got {size}")

    total_pages = math.ceil(total_items / size)
    page = max(1, min(current_page, total_pages))
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        page_size=size,
        total_items=total_items,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def paginate_articles(articles: Sequence[Article], current_page: int, page_size: PageSize) -> List[Article]:
    if page_size == "all":
        return list(articles)
    start = (current_page - 1) * int(page_size)
    return list(articles[start : start + int(page_size)])


def adjacent_articles(articles: Sequence[Article], article_id: str) -> AdjacentArticles:
    """Previous and next article around ``article_id`` in list order."""
    for index, article in enumerate(articles):
        if article.get("id") == article_id:
            return AdjacentArticles(
                prev=articles[index - 1] if index > 0 else None,
                next=articles[index + 1] if index < len(articles) - 1 else None,
            )
    return AdjacentArticles()


def count_by_category(articles: Sequence[Article]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for article in articles:
        for category in article.get("categories") or []:
            counts[category] = counts.get(category, 0) + 1
    return counts


__all__ = [
    "AdjacentArticles",
    "Pagination",
    "SORT_ORDERS",
    "adjacent_articles",
    "calculate_pagination",
    "count_by_category",
    "filter_articles",
    "paginate_articles",
]
