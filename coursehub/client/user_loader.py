"""
User record loading with provisioning retry.

A freshly signed-up user exists at the identity provider before the
provisioning webhook has created their user record, so the first
``/api/user/data`` calls may answer "User Not Found". The loader retries
that specific answer a bounded number of times before giving up.

States::

    IDLE -> FETCHING -> SUCCESS
                     -> RETRY_PENDING -> FETCHING -> ...
                     -> FAILED
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from coursehub.client.errors import NetworkError
from coursehub.client.notifier import Notifier
from coursehub.client.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User Not Found"
RETRIES_EXHAUSTED_MESSAGE = "Could not load user profile. Please try refreshing."


class LoaderState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RETRY_PENDING = "retry_pending"
    SUCCESS = "success"
    FAILED = "failed"


class UserRecordLoader:
    """
    Fetches the current user's record, retrying while it is not provisioned.

    Only the "User Not Found" answer is retried. Other server errors and
    transport failures end the load immediately.
    """

    def __init__(
        self,
        fetch_user: Callable[[], Awaitable[Dict[str, Any]]],
        scheduler: Scheduler,
        notifier: Notifier,
        max_attempts: int = 3,
        retry_delay: float = 2.0,
        on_loading_change: Optional[Callable[[bool], None]] = None,
        on_result: Optional[Callable[[Optional[Dict[str, Any]]], Awaitable[None]]] = None,
    ):
        """
        Initialize UserRecordLoader.

        Args:
            fetch_user: Async callable returning the /api/user/data body
            scheduler: Runs the delayed retry
            notifier: Receives user-facing error messages
            max_attempts: Total attempts, including the first
            retry_delay: Seconds between attempts
            on_loading_change: Called when the loading flag flips
            on_result: Awaited with the user record, or None on failure
        """
        self._fetch_user = fetch_user
        self._scheduler = scheduler
        self._notifier = notifier
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._on_loading_change = on_loading_change
        self._on_result = on_result

        self.state = LoaderState.IDLE
        self.user: Optional[Dict[str, Any]] = None
        self.attempts = 0
        self.is_loading = False

        self._timer: Optional[TimerHandle] = None
        # Bumped on reset so stale responses and timers are ignored
        self._generation = 0

    @property
    def is_active(self) -> bool:
        return self.state in (LoaderState.FETCHING, LoaderState.RETRY_PENDING)

    async def start(self) -> None:
        """Begin loading. Does nothing while a load is already in progress."""
        if self.is_active:
            return

        self.attempts = 0
        self.user = None
        self._set_loading(True)
        await self._attempt(self._generation)

    def reset(self) -> None:
        """Abandon any load in progress, e.g. when the signed-in identity changes."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        self._generation += 1
        self.state = LoaderState.IDLE
        self.user = None
        self.attempts = 0
        self._set_loading(False)

    async def _attempt(self, generation: int) -> None:
        self.state = LoaderState.FETCHING
        self.attempts += 1

        try:
            response = await self._fetch_user()
        except NetworkError as e:
            if generation == self._generation:
                await self._fail(f"Fetch User Data Network Error: {e.detail}")
            return

        if generation != self._generation:
            return

        if response.get("success"):
            self.user = response.get("user")
            self.state = LoaderState.SUCCESS
            self._set_loading(False)
            if self._on_result is not None:
                await self._on_result(self.user)
            return

        message = response.get("message")

        if message == USER_NOT_FOUND and self.attempts < self._max_attempts:
            logger.warning(
                f"User record not provisioned yet (attempt {self.attempts}), "
                f"retrying in {self._retry_delay}s"
            )
            self.state = LoaderState.RETRY_PENDING
            self._timer = self._scheduler.call_later(
                self._retry_delay,
                lambda: self._retry(generation)
            )
            return

        if message == USER_NOT_FOUND:
            logger.error(f"User record still missing after {self.attempts} attempts")
            await self._fail(RETRIES_EXHAUSTED_MESSAGE)
        else:
            await self._fail(f"Fetch User Data Error: {message}")

    async def _retry(self, generation: int) -> None:
        self._timer = None
        if generation != self._generation or self.state != LoaderState.RETRY_PENDING:
            return
        await self._attempt(generation)

    async def _fail(self, message: str) -> None:
        self._notifier.error(message)
        self.user = None
        self.state = LoaderState.FAILED
        self._set_loading(False)
        if self._on_result is not None:
            await self._on_result(None)

    def _set_loading(self, value: bool) -> None:
        if self.is_loading == value:
            return
        self.is_loading = value
        if self._on_loading_change is not None:
            self._on_loading_change(value)
