"""Storefront cart proxy: session headers, stale-nonce retry and cart sync."""
from .cart_api import StoreCartClient
from .diff import (
    ActualItem,
    AddItem,
    CartDiff,
    DesiredItem,
    RemoveItem,
    UpdateItem,
    diff_cart,
    parse_actual_items,
    parse_desired_items,
)
from .refresh import ensure_session, fetch_new_session
from .retry import execute_with_retry
from .session import (
    Session,
    extract_session,
    forward_session_headers,
    to_outbound_headers,
    update_from_response_headers,
)
from .sync import CartSynchronizer, SyncFailure, SyncResult

__all__ = [
    "StoreCartClient",
    "Session",
    "extract_session",
    "to_outbound_headers",
    "update_from_response_headers",
    "forward_session_headers",
    "fetch_new_session",
    "ensure_session",
    "execute_with_retry",
    "DesiredItem",
    "ActualItem",
    "AddItem",
    "UpdateItem",
    "RemoveItem",
    "CartDiff",
    "diff_cart",
    "parse_actual_items",
    "parse_desired_items",
    "CartSynchronizer",
    "SyncFailure",
    "SyncResult",
]
