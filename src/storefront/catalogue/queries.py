"""Read side of the catalogue: home page, search, listings and suggestions."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.errors import InvalidInput, NotFound

SORTABLE_FIELDS = frozenset({"created_at", "popularity", "price", "rating_avg", "title"})
DEFAULT_SORT = "-created_at"

_SORT_ALIASES = {
    "createdAt": "created_at",
    "ratingAvg": "rating_avg",
    "rating": "rating_avg",
}


def _split(value) -> tuple[str, ...]:
    """Accept ``"a,b"`` or ``["a", "b,c"]`` and return the non-blank parts."""
    if not value:
        return ()
    values = [value] if isinstance(value, str) else list(value)
    return tuple(part.strip() for v in values for part in v.split(",") if part.strip())


def normalize_sort(sort: str | None) -> str:
    """Map a client sort key onto a sortable field; unknown keys fall back to newest first."""
    if not sort:
        return DEFAULT_SORT

    descending = sort.startswith("-")
    name = sort.lstrip("-+").strip()
    name = _SORT_ALIASES.get(name, name)
    if name not in SORTABLE_FIELDS:
        return DEFAULT_SORT
    return f"-{name}" if descending else name


@dataclass(frozen=True)
class SearchCriteria:
    q: str | None = None
    brands: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    min_price: float | None = None
    max_price: float | None = None
    category_id: str | None = None
    subcategory_id: str | None = None
    page: int = 1
    limit: int = 12
    sort: str = DEFAULT_SORT

    @classmethod
    def build(
        cls,
        q=None,
        brand=None,
        tags=None,
        min_price=None,
        max_price=None,
        category_id=None,
        subcategory_id=None,
        page=None,
        limit=None,
        sort=None,
    ):
        """Normalize raw query values: page is at least 1, limit is clamped."""
        max_limit = current_domain.SEARCH_MAX_LIMIT
        page = max(1, int(page or 1))
        limit = current_domain.SEARCH_DEFAULT_LIMIT if limit is None else int(limit)
        limit = min(max(1, limit), max_limit)

        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidInput(
                "minPrice cannot exceed maxPrice",
                {"minPrice": ["minPrice cannot exceed maxPrice"]},
            )

        return cls(
            q=q.strip() if q and q.strip() else None,
            brands=_split(brand),
            tags=_split(tags),
            min_price=min_price,
            max_price=max_price,
            category_id=category_id or None,
            subcategory_id=subcategory_id or None,
            page=page,
            limit=limit,
            sort=normalize_sort(sort),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def order_by(self) -> tuple[str, ...]:
        # Newest first breaks ties so that paging is deterministic.
        if self.sort.lstrip("-") == "created_at":
            return (self.sort,)
        return (self.sort, DEFAULT_SORT)


@dataclass(frozen=True)
class Page:
    items: list = field(default_factory=list)
    page: int = 1
    limit: int = 12
    total: int = 0

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.total else 0


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def home(per_category: int | None = None) -> list[tuple[Category, list[Product]]]:
    """Top products of every active category, by popularity then recency."""
    per_category = per_category or current_domain.HOME_PRODUCTS_PER_CATEGORY
    products = current_domain.repository_for(Product)

    return [
        (category, products.top_in_category(category.id, per_category))
        for category in current_domain.repository_for(Category).active()
    ]


def search(criteria: SearchCriteria) -> Page:
    results = current_domain.repository_for(Product).search(
        q=criteria.q,
        brands=criteria.brands,
        tags=criteria.tags,
        min_price=criteria.min_price,
        max_price=criteria.max_price,
        category_id=criteria.category_id,
        subcategory_id=criteria.subcategory_id,
        order_by=criteria.order_by,
        offset=criteria.offset,
        limit=criteria.limit,
    )
    return Page(items=list(results.items), page=criteria.page, limit=criteria.limit, total=results.total)


def products_in_category(category_id, criteria: SearchCriteria) -> Page:
    category = current_domain.repository_for(Category).query.filter(id=category_id, is_active=True).all().first
    if category is None:
        raise NotFound("Category not found")

    return search(
        SearchCriteria(
            q=criteria.q,
            brands=criteria.brands,
            tags=criteria.tags,
            min_price=criteria.min_price,
            max_price=criteria.max_price,
            category_id=str(category.id),
            subcategory_id=criteria.subcategory_id,
            page=criteria.page,
            limit=criteria.limit,
            sort=criteria.sort,
        )
    )


def product_detail(product_id) -> Product:
    product = current_domain.repository_for(Product).find_active(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def categories() -> list[Category]:
    return current_domain.repository_for(Category).active()


def suggestions(q: str | None, limit: int | None = None) -> list[Product]:
    """Quick matches for the search box. Blank input yields nothing."""
    if not q or not q.strip():
        return []

    limit = limit or current_domain.SUGGESTION_LIMIT
    results = current_domain.repository_for(Product).search(
        q=q,
        order_by=("-popularity", DEFAULT_SORT),
        limit=limit,
    )
    return list(results.items)
