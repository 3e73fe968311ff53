"""SQLAlchemy-backed implementations of the domain repositories.

All repositories share the session of the unit of work that created them,
so everything they write belongs to one transaction.  ``get_for_update``
issues ``SELECT ... FOR UPDATE`` (ignored by SQLite, which serialises
writers with ``BEGIN IMMEDIATE`` instead, see ``database.py``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Integer, cast, func, or_, select
from sqlalchemy.orm import Session

from storefront.domain.model.inventory import InventoryItem
from storefront.domain.model.order import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.models import (
    InventoryRow,
    OrderItemRow,
    OrderRow,
    ProductRow,
)


def _aware(value: datetime | None) -> datetime | None:
    """SQLite hands datetimes back naive; everything stored is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return self._to_domain(row) if row is not None else None

    def get_by_name(self, name: str) -> Product | None:
        stmt = select(ProductRow).where(func.lower(ProductRow.name) == name.lower())
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Product]:
        stmt = select(ProductRow).order_by(ProductRow.name)
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def next_id(self) -> str:
        current = self._session.execute(
            select(func.max(cast(ProductRow.id, Integer)))
        ).scalar()
        return str((current or 0) + 1)

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id)
        if row is None:
            row = ProductRow(id=product.id)
            self._session.add(row)
        row.name = product.name
        row.price = product.price.amount
        row.currency = product.price.currency
        row.is_active = product.is_active
        row.deleted_at = product.deleted_at
        self._session.flush()

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price=Money(Decimal(row.price), row.currency),
            is_active=row.is_active,
            deleted_at=_aware(row.deleted_at),
        )


class SqlAlchemyInventoryRepository(InventoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- InventoryRepository interface ----------------------------------------

    def get_by_product_id(self, product_id: str) -> InventoryItem | None:
        row = self._session.get(InventoryRow, product_id)
        return self._to_domain(row) if row is not None else None

    def get_for_update(self, product_id: str) -> InventoryItem | None:
        stmt = (
            select(InventoryRow)
            .where(InventoryRow.product_id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[InventoryItem]:
        stmt = select(InventoryRow).order_by(InventoryRow.product_name)
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_low_stock(self) -> list[InventoryItem]:
        stmt = (
            select(InventoryRow)
            .where(InventoryRow.quantity <= InventoryRow.low_stock_threshold)
            .order_by(InventoryRow.quantity, InventoryRow.product_name)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def save(self, item: InventoryItem) -> None:
        row = self._session.get(InventoryRow, item.product_id)
        if row is None:
            row = InventoryRow(product_id=item.product_id)
            self._session.add(row)
        row.product_name = item.product_name
        row.quantity = item.quantity
        row.reserved = item.reserved
        row.low_stock_threshold = item.low_stock_threshold
        self._session.flush()

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: InventoryRow) -> InventoryItem:
        return InventoryItem(
            product_id=row.product_id,
            product_name=row.product_name,
            quantity=row.quantity,
            reserved=row.reserved,
            low_stock_threshold=row.low_stock_threshold,
        )


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.get(OrderRow, order_id)
        return self._to_domain(row) if row is not None else None

    def get_for_update(self, order_id: int) -> Order | None:
        stmt = (
            select(OrderRow)
            .where(OrderRow.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def get_by_number(self, order_number: str) -> Order | None:
        stmt = select(OrderRow).where(OrderRow.order_number == order_number)
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def list_orders(
        self,
        status: OrderStatus | None = None,
        search: str | None = None,
        include_archived: bool = False,
        user_id: str | None = None,
    ) -> list[Order]:
        stmt = select(OrderRow)
        if not include_archived:
            stmt = stmt.where(OrderRow.deleted_at.is_(None))
        if status is not None:
            stmt = stmt.where(OrderRow.status == status.value)
        if user_id is not None:
            stmt = stmt.where(OrderRow.user_id == user_id)
        if search:
            term = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(OrderRow.order_number).contains(term),
                    func.lower(OrderRow.shipping_name).contains(term),
                    func.lower(OrderRow.shipping_phone).contains(term),
                )
            )
        stmt = stmt.order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_stale(self, statuses: frozenset[OrderStatus], before: datetime) -> list[Order]:
        stmt = (
            select(OrderRow)
            .where(OrderRow.status.in_([s.value for s in statuses]))
            .where(OrderRow.updated_at < before)
            .order_by(OrderRow.id)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def add(self, order: Order) -> None:
        row = OrderRow(order_number=order.order_number, created_at=order.created_at)
        self._copy_header(order, row)
        row.items = [self._item_row(item) for item in order.items]
        self._session.add(row)
        self._session.flush()
        order.id = row.id

    def save(self, order: Order) -> None:
        row = self._require_row(order)
        self._copy_header(order, row)
        self._session.flush()

    def replace_items(self, order: Order) -> None:
        row = self._require_row(order)
        row.items.clear()
        self._session.flush()
        row.items.extend(self._item_row(item) for item in order.items)
        self._session.flush()

    def delete(self, order: Order) -> None:
        row = self._require_row(order)
        self._session.delete(row)
        self._session.flush()

    # --- Mapping --------------------------------------------------------------

    def _require_row(self, order: Order) -> OrderRow:
        row = self._session.get(OrderRow, order.id) if order.id is not None else None
        if row is None:
            raise LookupError(f"Order #{order.id} is not persisted")
        return row

    @staticmethod
    def _copy_header(order: Order, row: OrderRow) -> None:
        address = order.shipping_address
        row.status = order.status.value
        row.user_id = order.user_id
        row.payment_method = order.payment_method.value
        row.currency = order.total.currency
        row.subtotal = order.subtotal.amount
        row.tax = order.tax.amount
        row.shipping = order.shipping.amount
        row.discount = order.discount.amount
        row.total = order.total.amount
        row.shipping_name = address.name
        row.shipping_address_line1 = address.address_line1
        row.shipping_address_line2 = address.address_line2
        row.shipping_city = address.city
        row.shipping_province = address.province
        row.shipping_postal_code = address.postal_code
        row.shipping_country = address.country
        row.shipping_phone = address.phone
        row.shipping_email = address.email
        row.updated_at = order.updated_at
        row.deleted_at = order.deleted_at

    @staticmethod
    def _item_row(item: OrderItem) -> OrderItemRow:
        return OrderItemRow(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity.value,
            price=item.price.amount,
            total=item.total.amount,
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        currency = row.currency

        def money(value: Decimal) -> Money:
            return Money(Decimal(value), currency)

        items = [
            OrderItem(
                product_id=i.product_id,
                product_name=i.product_name,
                quantity=Quantity(i.quantity),
                price=money(i.price),
            )
            for i in row.items
        ]
        return Order(
            id=row.id,
            order_number=row.order_number,
            items=items,
            shipping_address=ShippingAddress(
                name=row.shipping_name,
                address_line1=row.shipping_address_line1,
                address_line2=row.shipping_address_line2,
                city=row.shipping_city,
                province=row.shipping_province,
                postal_code=row.shipping_postal_code,
                country=row.shipping_country,
                phone=row.shipping_phone,
                email=row.shipping_email,
            ),
            status=OrderStatus(row.status),
            user_id=row.user_id,
            payment_method=PaymentMethod(row.payment_method),
            subtotal=money(row.subtotal),
            tax=money(row.tax),
            shipping=money(row.shipping),
            discount=money(row.discount),
            total=money(row.total),
            created_at=_aware(row.created_at),
            updated_at=_aware(row.updated_at),
            deleted_at=_aware(row.deleted_at),
        )
