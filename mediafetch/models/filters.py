"""Query parameters for catalog list fetches."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, PositiveInt


class Order(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Sort(str, Enum):
    POPULARITY = "popularity"
    YEAR = "year"
    DATE = "date"
    RATING = "rating"
    ALPHABET = "alphabet"
    TRENDING = "trending"


class Filters(BaseModel):
    """Filters a provider can use to sort or search.

    Providers never hold on to the caller's instance: every fetch works on
    a snapshot taken when the call is made.
    """

    keywords: Optional[str] = None
    genre: Optional[str] = None
    order: Order = Order.DESC
    sort: Sort = Sort.POPULARITY
    page: Optional[PositiveInt] = None
    lang_code: Optional[str] = "en"

    def snapshot(self) -> "Filters":
        """Return an independent deep copy."""
        return self.model_copy(deep=True)
