"""Domain service: Inventory Ledger.

The only code path that mutates ``InventoryItem.quantity`` and
``InventoryItem.reserved``.  One ledger instance lives for exactly one
unit of work: every row it touches is loaded through
``InventoryRepository.get_for_update`` (so concurrent writers for the same
product serialize) and kept for the rest of the transaction.

The batch operations use a two-phase approach (validate-then-mutate) so
inventory is never left partially adjusted when one product fails, even
before the surrounding transaction rolls back.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InventoryContractError,
)
from storefront.domain.model.inventory import InventoryItem
from storefront.domain.repository.inventory_repository import InventoryRepository


class InventoryLedger:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo
        self._locked: dict[str, InventoryItem] = {}

    def lock(self, product_ids: Iterable[str]) -> dict[str, InventoryItem]:
        """Load and lock inventory rows, always in product-id order."""
        for product_id in sorted(set(product_ids)):
            if product_id in self._locked:
                continue
            inv = self._inventory_repo.get_for_update(product_id)
            if inv is None:
                raise EntityNotFoundError(
                    f"No inventory record for product ID '{product_id}'"
                )
            self._locked[product_id] = inv
        return dict(self._locked)

    # --- Single-product primitives --------------------------------------------

    def reserve(self, product_id: str, qty: int) -> None:
        """``quantity -= qty; reserved += qty``; InsufficientStock if short."""
        inv = self._get(product_id)
        inv.reserve(qty)
        self._inventory_repo.save(inv)

    def release(self, product_id: str, qty: int) -> None:
        """``quantity += qty; reserved -= qty``."""
        inv = self._get(product_id)
        inv.release(qty)
        self._inventory_repo.save(inv)

    def consume(self, product_id: str, qty: int) -> None:
        """``reserved -= qty`` only; the units have left the building."""
        inv = self._get(product_id)
        inv.consume(qty)
        self._inventory_repo.save(inv)

    # --- All-or-nothing batches -----------------------------------------------

    def reserve_all(self, quantities: Mapping[str, int]) -> None:
        """Reserve every line or none of them."""
        items = self.lock(quantities)
        for product_id, qty in quantities.items():
            inv = items[product_id]
            if qty > inv.quantity:
                raise InsufficientStockError(inv.product_name, qty, inv.quantity)
        for product_id in sorted(quantities):
            self.reserve(product_id, quantities[product_id])

    def release_all(self, quantities: Mapping[str, int]) -> None:
        """Release every held line or none of them."""
        self._check_reserved(quantities, "release")
        for product_id in sorted(quantities):
            self.release(product_id, quantities[product_id])

    def consume_all(self, quantities: Mapping[str, int]) -> None:
        """Consume every held line or none of them."""
        self._check_reserved(quantities, "consume")
        for product_id in sorted(quantities):
            self.consume(product_id, quantities[product_id])

    # --- Internal helpers -----------------------------------------------------

    def _get(self, product_id: str) -> InventoryItem:
        if product_id not in self._locked:
            self.lock([product_id])
        return self._locked[product_id]

    def _check_reserved(self, quantities: Mapping[str, int], action: str) -> None:
        items = self.lock(quantities)
        for product_id, qty in quantities.items():
            inv = items[product_id]
            if qty > inv.reserved:
                raise InventoryContractError(
                    f"Cannot {action} {qty} of {inv.product_name} "
                    f"- only {inv.reserved} currently reserved"
                )
