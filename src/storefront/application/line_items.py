"""Turn requested (product, quantity) pairs into priced OrderItem snapshots."""

from __future__ import annotations

from storefront.application.dto import OrderItemSpec
from storefront.domain.exceptions import ProductNotFoundError, ValidationError
from storefront.domain.model.order import OrderItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.product_repository import ProductRepository


def resolve_product(product_repo: ProductRepository, ref: str) -> Product:
    """Look a product up by ID first, then by name."""
    product = product_repo.get_by_id(ref) or product_repo.get_by_name(ref)
    if product is None or product.deleted_at is not None:
        raise ProductNotFoundError(f"Product not found: '{ref}'")
    return product


def build_order_items(
    product_repo: ProductRepository,
    specs: list[OrderItemSpec],
    require_active: bool = True,
) -> list[OrderItem]:
    """Resolve every OrderItemSpec and snapshot the *current* product price.

    Several specs for the same product are merged into one line.
    """
    if not specs:
        raise ValidationError("Order must contain at least one item")

    merged: dict[str, tuple[Product, int]] = {}
    for spec in specs:
        Quantity(spec.quantity)  # validates before any lookup
        product = resolve_product(product_repo, spec.product)
        if require_active and not product.is_active:
            raise ProductNotFoundError(f"Product '{product.name}' is not available")
        _, qty = merged.get(product.id, (product, 0))
        merged[product.id] = (product, qty + spec.quantity)

    return [
        OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=Quantity(qty),
            price=product.price,  # <-- price snapshot
        )
        for product, qty in merged.values()
    ]
