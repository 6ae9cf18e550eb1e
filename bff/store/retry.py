"""
Stale-nonce retry.

The only recoverable Store API failure is a rotated-out nonce, which one
refresh either fixes or doesn't. So: one refresh, one retry, nothing else.
"""

from dataclasses import replace
from typing import Awaitable, Callable, Optional, TypeVar

from bff.logging import get_logger
from bff.upstream import UpstreamError

from .session import Session

logger = get_logger(__name__)

T = TypeVar("T")

Action = Callable[[Session], Awaitable[T]]
Refresher = Callable[..., Awaitable[Session]]


async def execute_with_retry(
    action: Action,
    session: Session,
    refresher: Refresher,
) -> tuple[T, Session]:
    """
    Run action(session), refreshing the session once on a stale credential.

    Args:
        action: Upstream call taking the session to present
        session: Session for the first attempt
        refresher: Called as refresher(payment_method=...) to mint a new session

    Returns:
        (action result, session the successful attempt used)

    Raises:
        UpstreamError: non-stale failures immediately; the stale failure when
            the refresh itself failed; the retry's failure otherwise
    """
    try:
        return await action(session), session
    except UpstreamError as e:
        if not e.is_stale_credential:
            raise
        stale_error = e

    logger.info(
        "Stale nonce detected (%s, %s), refreshing session and retrying",
        stale_error.status_code, stale_error.code,
    )
    refreshed: Optional[Session] = await refresher(payment_method=session.payment_method)
    if refreshed is None or refreshed.is_empty:
        logger.warning("Session refresh failed, giving up on retry")
        raise stale_error

    refreshed = replace(refreshed, payment_method=session.payment_method)
    return await action(refreshed), refreshed
