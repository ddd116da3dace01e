from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def by_idempotency_key(self, user_id, key) -> Order | None:
        return self.query.filter(user_id=str(user_id), idempotency_key=key).all().first

    def owned_by(self, user_id, order_id) -> Order | None:
        return self.query.filter(id=str(order_id), user_id=str(user_id)).all().first

    def history(self, user_id, status=None, offset=0, limit=12):
        """The user's orders, newest first, as a protean ``ResultSet``."""
        query = self.query.filter(user_id=str(user_id))
        if status:
            query = query.filter(status=status)
        return query.order_by("-placed_at").offset(offset).limit(limit).all()
