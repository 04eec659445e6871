"""Scoped ownership of live query handles."""
from __future__ import annotations

import logging
from collections.abc import Iterator

from wordflight_chat.application.ports.store import Subscription

logger = logging.getLogger(__name__)


class SubscriptionScope:
    """Keyed set of subscriptions that are always released together or by key.

    Replacing a key closes the handle it held, so a key never owns more than
    one live query.
    """

    def __init__(self) -> None:
        self._handles: dict[str, Subscription] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._handles))

    def __len__(self) -> int:
        return len(self._handles)

    def hold(self, key: str, handle: Subscription) -> None:
        previous = self._handles.get(key)
        if previous is not None and previous is not handle:
            previous.close()
        self._handles[key] = handle

    def release(self, key: str) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.close()
        logger.debug("Released subscription %s", key)
        return True

    def retain_only(self, keys: set[str]) -> list[str]:
        """Release every handle whose key is not in ``keys``; return the released keys."""
        dropped = [key for key in self._handles if key not in keys]
        for key in dropped:
            self.release(key)
        return dropped

    def release_all(self) -> None:
        for key in list(self._handles):
            self.release(key)

    async def refresh_all(self) -> None:
        for handle in list(self._handles.values()):
            await handle.refresh()
