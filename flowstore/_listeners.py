from __future__ import annotations

import logging

from enum import Enum
from typing import Callable, Sequence


__all__ = (
    "Listener",
    "ListenerErrorPolicy",
    "Subscription",

    "notify"
)


logger = logging.getLogger(__name__)


Listener = Callable[[], None]


class ListenerErrorPolicy(str, Enum):
    COLLECT = "collect"
    PROPAGATE = "propagate"
    LOG = "log"


class Subscription:
    listener: Listener

    _active: bool
    _remove: Callable[[Subscription], None]

    def __init__(
        self,
        listener: Listener,
        remove: Callable[[Subscription], None]
    ) -> None:
        self.listener = listener

        self._active = True
        self._remove = remove

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return

        self._active = False
        self._remove(self)

    def __call__(self) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"

        return f"<Subscription {self.listener!r} ({state})>"


def notify(
    subscriptions: Sequence[Subscription],
    policy: ListenerErrorPolicy
) -> list[Exception]:
    """Invoke every listener in order.

    Under ``PROPAGATE`` the first failure is re-raised and the remaining
    listeners are skipped. Otherwise failures are logged and returned so the
    caller can decide what to surface.
    """
    errors: list[Exception] = []

    for subscription in subscriptions:
        try:
            subscription.listener()
        except Exception as error:
            if policy is ListenerErrorPolicy.PROPAGATE:
                raise

            logger.exception("Listener %r failed", subscription.listener)
            errors.append(error)

    return errors
