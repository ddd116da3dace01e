from storefront.domain import storefront
from storefront.identity.user import User, normalize_email


@storefront.repository(part_of=User)
class UserRepository:
    def by_email(self, email) -> User | None:
        return self.query.filter(email=normalize_email(email)).all().first

    def by_phone(self, phone) -> User | None:
        return self.query.filter(phone=(phone or "").strip()).all().first
