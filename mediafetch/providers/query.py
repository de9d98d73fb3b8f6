"""Compile Filters into provider query parameters."""

from typing import List, Mapping, NamedTuple, Sequence, Tuple
from urllib.parse import urlencode

from mediafetch.models.filters import Filters, Order, Sort


class QueryTable(NamedTuple):
    """How one provider names its query parameters and tokens.

    A key set to None is never sent.
    """

    sort_tokens: Mapping[Sort, str]
    order_tokens: Tuple[str, str]  # (ascending, descending)
    limit: int
    limit_key: str = "limit"
    keywords_key: str = "keywords"
    genre_key: str = "genre"
    order_key: str = "order"
    lang_key: str | None = "lang"
    sort_key: str = "sort"
    page_key: str | None = None
    extra: Tuple[Tuple[str, str], ...] = ()

    def sort_token(self, sort: Sort) -> str:
        return self.sort_tokens.get(sort, self.sort_tokens[Sort.POPULARITY])

    def order_token(self, order: Order) -> str:
        ascending, descending = self.order_tokens
        return ascending if order == Order.ASC else descending


def compile_query(filters: Filters, table: QueryTable) -> List[Tuple[str, str]]:
    """Return the ordered query parameters for filters.

    Order: limit, keywords, genre, order, lang, sort, page, then extras.
    """
    params = [(table.limit_key, str(table.limit))]

    if filters.keywords is not None:
        params.append((table.keywords_key, filters.keywords))

    if filters.genre is not None:
        params.append((table.genre_key, filters.genre))

    params.append((table.order_key, table.order_token(filters.order)))

    if table.lang_key and filters.lang_code is not None:
        params.append((table.lang_key, filters.lang_code))

    params.append((table.sort_key, table.sort_token(filters.sort)))

    if table.page_key:
        params.append((table.page_key, str(filters.page or 1)))

    params.extend(table.extra)
    return params


def encode_query(params: Sequence[Tuple[str, str]]) -> str:
    return urlencode(params)
