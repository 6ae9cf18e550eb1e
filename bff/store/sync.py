"""
Cart sync: set the upstream cart to exactly the client's items.

Calls are strictly sequential. Each Store API response may rotate the
nonce, cookie or cart token, and the next call must present the rotated
values, so the session is folded through every step.
"""

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Awaitable, Callable, Optional

import httpx

from bff.config import get_settings
from bff.errors import ERROR_SYNC_TIMEOUT, AppError
from bff.logging import get_logger, sanitize_id_for_logging
from bff.upstream import UpstreamError, UpstreamResponse

from .cart_api import StoreCartClient
from .diff import CartDiff, DesiredItem, diff_cart, parse_actual_items
from .refresh import ensure_session, fetch_new_session
from .retry import execute_with_retry
from .session import Session, update_from_response_headers

logger = get_logger(__name__)


@dataclass
class SyncFailure:
    """One add/update/remove that failed and was skipped."""
    operation: str
    target: str
    code: str
    message: str


@dataclass
class SyncResult:
    cart: Any
    session: Session
    headers: httpx.Headers
    diff: CartDiff
    failures: list[SyncFailure] = field(default_factory=list)
    # Every upstream Set-Cookie of the sync, bootstrap and refreshes included
    set_cookies: list[str] = field(default_factory=list)


class CartSynchronizer:
    """Runs one "set cart to this exact state" operation."""

    def __init__(self, cart_client: StoreCartClient, timeout: Optional[float] = None):
        self.cart_client = cart_client
        self.timeout = timeout or get_settings().sync_timeout_seconds

    async def _refresh(self, payment_method: Optional[str] = None) -> Session:
        return await fetch_new_session(self.cart_client, payment_method=payment_method)

    async def call(
        self,
        session: Session,
        action: Callable[[Session], Awaitable[UpstreamResponse]],
    ) -> tuple[UpstreamResponse, Session]:
        """Retry-wrapped call; returns the response and the session after it."""
        response, used = await execute_with_retry(action, session, self._refresh)
        return response, update_from_response_headers(used, response.headers)

    async def sync(self, session: Session, desired: list[DesiredItem]) -> SyncResult:
        """
        Converge the upstream cart to `desired`.

        Individual add/update/remove failures are logged and skipped; the
        result always carries the final upstream cart. Failures reading the
        cart before or after the operations propagate.

        Raises:
            UpstreamError: when the current or final cart cannot be read
            AppError: 504 when the whole sync exceeds the sync timeout
        """
        try:
            return await asyncio.wait_for(self._sync(session, desired), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Cart sync exceeded %ss", self.timeout)
            raise AppError(ERROR_SYNC_TIMEOUT, 504, "sync_timeout")

    async def _sync(self, session: Session, desired: list[DesiredItem]) -> SyncResult:
        session = await ensure_session(self.cart_client, session)

        current, session = await self.call(session, self.cart_client.get_cart)
        diff = diff_cart(desired, parse_actual_items(current.data))
        logger.info("Sync Logic: %s", diff.summary())

        operations = (
            [("remove", op.item_key, partial(self.cart_client.remove_item, item_key=op.item_key))
             for op in diff.removals]
            + [("update", op.item_key,
                partial(self.cart_client.update_item, item_key=op.item_key, quantity=op.quantity))
               for op in diff.updates]
            + [("add", str(op.product_id),
                partial(self.cart_client.add_item, product_id=op.product_id,
                        quantity=op.quantity, variation_id=op.variation_id))
               for op in diff.additions]
        )

        failures: list[SyncFailure] = []
        for operation, target, action in operations:
            try:
                _, session = await self.call(session, action)
            except UpstreamError as e:
                logger.error(
                    "Failed to %s item %s: %s (%s)",
                    operation, sanitize_id_for_logging(target), e.message, e.code,
                )
                failures.append(SyncFailure(operation, target, e.code, e.message))

        final, session = await self.call(session, self.cart_client.get_cart)
        return SyncResult(
            cart=final.data,
            session=session,
            headers=final.headers,
            diff=diff,
            failures=failures,
            set_cookies=list(self.cart_client.set_cookies),
        )
