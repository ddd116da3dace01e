"""Category aggregate with its nested subcategories."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String, Text

from storefront.domain import storefront


@storefront.entity(part_of="Category")
class Subcategory:
    name: String(required=True, max_length=100)
    image_url: String(max_length=1000)
    is_active: Boolean(default=True)


@storefront.aggregate
class Category:
    """A top-level grouping of products shown in the storefront navigation.

    Category names are unique. Subcategory names are unique within their
    category; products may point at a subcategory for finer filtering.
    """

    name: String(required=True, max_length=100, unique=True)
    description: Text()
    image_url: String(max_length=1000)
    is_active: Boolean(default=True)
    subcategories: HasMany(Subcategory)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def subcategory_names_must_be_unique(self):
        names = [s.name.strip().lower() for s in self.subcategories]
        if len(names) != len(set(names)):
            raise ValidationError({"subcategories": ["Subcategory names must be unique within a category"]})

    @classmethod
    def create(cls, name, description=None, image_url=None, is_active=True):
        now = datetime.now(UTC)
        return cls(
            name=name.strip(),
            description=description,
            image_url=image_url,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )

    def add_subcategory(self, name, image_url=None, is_active=True):
        subcategory = Subcategory(name=name.strip(), image_url=image_url, is_active=is_active)
        self.add_subcategories(subcategory)
        self.updated_at = datetime.now(UTC)
        return subcategory

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Category is already inactive"]})

        self.is_active = False
        self.updated_at = datetime.now(UTC)

    @property
    def active_subcategories(self):
        return sorted((s for s in self.subcategories if s.is_active), key=lambda s: s.name.lower())

    def has_subcategory(self, subcategory_id) -> bool:
        return any(str(s.id) == str(subcategory_id) for s in self.subcategories)
