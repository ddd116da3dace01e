"""Repositories for catalogue aggregates."""

import operator
from functools import reduce

from protean.utils.query import Q

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Category)
class CategoryRepository:
    def active(self) -> list[Category]:
        """Active categories, alphabetically."""
        return self.query.filter(is_active=True).order_by("name").limit(None).all().items


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_active(self, product_id) -> Product | None:
        return self.query.filter(id=product_id, is_active=True).all().first

    def top_in_category(self, category_id, limit: int) -> list[Product]:
        """Most popular active products of a category, newest first among equals."""
        return (
            self.query.filter(category_id=category_id, is_active=True)
            .order_by(["-popularity", "-created_at"])
            .limit(limit)
            .all()
            .items
        )

    def search(
        self,
        q=None,
        brands=(),
        tags=(),
        min_price=None,
        max_price=None,
        category_id=None,
        subcategory_id=None,
        order_by=("-created_at",),
        offset=0,
        limit=12,
    ):
        """Filtered, sorted page of active products.

        Filters are ANDed together; the values of a multi-value filter (brands,
        tags) are ORed. Returns a protean ``ResultSet`` carrying the total.
        """
        criteria = Q(is_active=True)

        if q:
            criteria &= Q(search_terms__icontains=q.strip().lower())
        if brands:
            criteria &= reduce(operator.or_, [Q(brand__iexact=b) for b in brands])
        if tags:
            criteria &= Q(tags__overlap=list(tags))
        if min_price is not None:
            criteria &= Q(price__gte=min_price)
        if max_price is not None:
            criteria &= Q(price__lte=max_price)
        if category_id:
            criteria &= Q(category_id=category_id)
        if subcategory_id:
            criteria &= Q(subcategory_id=subcategory_id)

        return self.query.filter(criteria).order_by(list(order_by)).offset(offset).limit(limit).all()
