"""
Facility Search

Builds filtered, paged facility queries out of small predicate clauses.
Keyword, category and town values are always bound parameters; the same
clause list drives both the page query and the count query so the two can
never disagree about which rows match.

Pagination policy: a negative offset or a non-positive limit is rejected
with ValidationError when the SearchQuery is built. ``limit=None`` means
"no limit".
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional

from sqlalchemy import or_

from ecobuddy.errors import ValidationError
from ecobuddy.models import Category, Facility
from ecobuddy.services.store import store_operation, fits_integer_column

SORT_ORDERS = ('ASC', 'DESC')


class KeywordMatch:
    """Case-insensitive literal substring match over several columns (OR)."""

    def __init__(self, keyword, columns):
        self.keyword = keyword
        self.columns = columns

    def compile(self):
        # autoescape keeps % and _ in the keyword literal
        return or_(*[col.icontains(self.keyword, autoescape=True) for col in self.columns])


class Equals:
    """Exact equality on one column."""

    def __init__(self, column, value):
        self.column = column
        self.value = value

    def compile(self):
        return self.column == self.value


@dataclass(frozen=True)
class SearchQuery:
    keyword: str = ''
    category: Optional[int] = None
    town: Optional[str] = None
    offset: int = 0
    limit: Optional[int] = None
    sort_order: Optional[str] = None

    def __post_init__(self):
        if self.offset is None or self.offset < 0:
            raise ValidationError('Offset must be zero or greater.')
        if self.limit is not None and self.limit <= 0:
            raise ValidationError('Limit must be greater than zero.')
        if self.sort_order is not None and self.sort_order not in SORT_ORDERS:
            raise ValidationError('Sort order must be ASC or DESC.')
        if not fits_integer_column(self.offset):
            raise ValidationError('Page is out of range.')
        if self.limit is not None and not fits_integer_column(self.limit):
            raise ValidationError('Page is out of range.')

    @classmethod
    def from_params(cls, keyword='', category='', town='', **kwargs):
        """Build a query from raw request strings; empty filters mean "any"."""
        keyword = (keyword or '').strip()
        town = (town or '').strip() or None
        category = (category or '').strip() if isinstance(category, str) else category
        if category in ('', None):
            category = None
        else:
            try:
                category = int(category)
            except (TypeError, ValueError):
                raise ValidationError('Category must be a numeric id.')
            if not fits_integer_column(category):
                raise ValidationError('Unknown category.')
        return cls(keyword=keyword, category=category, town=town, **kwargs)

    def paged(self, page, page_size):
        """Same filters, restricted to a 1-based page number."""
        if page < 1:
            raise ValidationError('Page must be 1 or greater.')
        return replace(self, offset=(page - 1) * page_size, limit=page_size)

    def unbounded(self):
        """Same filters, no pagination."""
        return replace(self, offset=0, limit=None)

    def clauses(self):
        clauses = []
        if self.keyword:
            clauses.append(KeywordMatch(self.keyword, [Facility.title, Category.name, Facility.description]))
        if self.category is not None:
            clauses.append(Equals(Facility.category, self.category))
        if self.town is not None:
            clauses.append(Equals(Facility.town, self.town))
        return clauses

    def ordering(self):
        if self.sort_order == 'DESC':
            return [Facility.title.desc(), Facility.id.asc()]
        if self.sort_order == 'ASC':
            return [Facility.title.asc(), Facility.id.asc()]
        return [Facility.id.asc()]


@dataclass
class SearchPage:
    items: List[Facility]
    total: int
    query: SearchQuery

    @property
    def page(self):
        if not self.query.limit:
            return 1
        return self.query.offset // self.query.limit + 1

    @property
    def total_pages(self):
        if not self.query.limit:
            return 1 if self.total else 0
        return math.ceil(self.total / self.query.limit)


def clamp_page(page, page_size):
    """1-based page number from request input; missing or unusable values mean page 1."""
    if page is None or page < 1 or not fits_integer_column((page - 1) * page_size):
        return 1
    return page


def build_query(search):
    """Filtered (unordered, unpaged) query for ``search``."""
    return Facility.query.outerjoin(Facility.category_ref).filter(
        *[clause.compile() for clause in search.clauses()])


def search_facilities(search):
    """Return the matching page of facilities."""
    query = build_query(search).order_by(*search.ordering())
    if search.offset:
        query = query.offset(search.offset)
    if search.limit is not None:
        query = query.limit(search.limit)
    with store_operation('searching facilities'):
        return query.all()


def count_facilities(search):
    """Total matches for ``search``, ignoring offset and limit."""
    with store_operation('counting facilities'):
        return build_query(search).count()


def search_page(search):
    """Page of results together with the total match count."""
    return SearchPage(items=search_facilities(search), total=count_facilities(search), query=search)


def page_window(page, total_pages, visible=5):
    """Page numbers to show around ``page`` in the pagination bar."""
    if total_pages <= 0:
        return []
    start = max(1, page - visible // 2)
    end = min(total_pages, start + visible - 1)
    start = max(1, min(start, end - visible + 1))
    return list(range(start, end + 1))
