"""
Cart diff.

Converges the upstream cart to the client's desired items. The client never
knows upstream item keys, so both sides are joined on (product_id,
variation_id or 0) and keys are only taken from the upstream side.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

JoinKey = tuple[int, int]


@dataclass(frozen=True)
class DesiredItem:
    product_id: int
    variation_id: int = 0
    quantity: int = 1

    @property
    def join_key(self) -> JoinKey:
        return (self.product_id, self.variation_id or 0)


@dataclass(frozen=True)
class ActualItem:
    item_key: str
    product_id: int
    variation_id: int = 0
    quantity: int = 0

    @property
    def join_key(self) -> JoinKey:
        return (self.product_id, self.variation_id or 0)


@dataclass(frozen=True)
class AddItem:
    product_id: int
    variation_id: int
    quantity: int

    def payload(self) -> dict:
        return {"id": self.product_id, "quantity": self.quantity, "variation_id": self.variation_id}


@dataclass(frozen=True)
class UpdateItem:
    item_key: str
    quantity: int

    def payload(self) -> dict:
        return {"key": self.item_key, "quantity": self.quantity}


@dataclass(frozen=True)
class RemoveItem:
    item_key: str

    def payload(self) -> dict:
        return {"key": self.item_key}


@dataclass
class CartDiff:
    """Operations to apply in order: removals, then updates, then additions."""
    removals: list[RemoveItem] = field(default_factory=list)
    updates: list[UpdateItem] = field(default_factory=list)
    additions: list[AddItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.removals or self.updates or self.additions)

    def summary(self) -> str:
        return f"Add {len(self.additions)}, Update {len(self.updates)}, Remove {len(self.removals)}"


def parse_desired_items(items: Iterable[dict]) -> list[DesiredItem]:
    """Desired items from request dicts ({product_id, variation_id|null, quantity})."""
    return [
        DesiredItem(
            product_id=int(item["product_id"]),
            variation_id=int(item.get("variation_id") or 0),
            quantity=int(item["quantity"]),
        )
        for item in items
    ]


def parse_actual_items(cart_body: Any) -> list[ActualItem]:
    """Upstream cart lines from a Store API cart body ({items: [{key, id, ...}]})."""
    if not isinstance(cart_body, dict):
        return []
    return [
        ActualItem(
            item_key=str(item["key"]),
            product_id=int(item["id"]),
            variation_id=int(item.get("variation_id") or 0),
            quantity=int(item.get("quantity") or 0),
        )
        for item in cart_body.get("items") or []
    ]


def diff_cart(desired: Iterable[DesiredItem], actual: Iterable[ActualItem]) -> CartDiff:
    """
    Operations that turn `actual` into `desired`.

    - Desired key present upstream: update when quantities differ.
    - Desired key missing upstream: add.
    - Upstream key not desired: remove.

    Duplicate desired keys resolve last-wins. Quantity 0 is an ordinary
    quantity, not a removal; clients remove a line by omitting it.
    """
    actual_by_key = {item.join_key: item for item in actual}

    # Last-wins resolution, keeping first-seen order of keys
    wanted: dict[JoinKey, DesiredItem] = {}
    for item in desired:
        wanted[item.join_key] = item

    diff = CartDiff()
    kept: set[JoinKey] = set()

    for key, item in wanted.items():
        existing = actual_by_key.get(key)
        if existing is not None:
            kept.add(key)
            if existing.quantity != item.quantity:
                diff.updates.append(UpdateItem(existing.item_key, item.quantity))
        else:
            diff.additions.append(AddItem(item.product_id, item.variation_id or 0, item.quantity))

    for key, existing in actual_by_key.items():
        if key not in kept:
            diff.removals.append(RemoveItem(existing.item_key))

    return diff
