from typing import Any, Sequence


__all__ = (
    "InvalidActionError",
    "ListenerError",
    "ReentrantDispatchError",
    "StoreError",
)


class StoreError(Exception):
    pass


class InvalidActionError(StoreError, TypeError):
    def __init__(self, action: Any, expected: Any) -> None:
        super().__init__(
            f"Expected action of type {expected!r}, "
            f"got {type(action).__qualname__}"
        )

        self.action = action
        self.expected = expected


class ReentrantDispatchError(StoreError, RuntimeError):
    def __init__(self) -> None:
        super().__init__("Can't dispatch during a reduce")


class ListenerError(StoreError):
    """Raised after notification when one or more listeners failed.

    The state transition that triggered the notification has already been
    committed; ``state`` holds it.
    """

    def __init__(self, state: Any, errors: Sequence[BaseException]) -> None:
        super().__init__(f"{len(errors)} listener(s) failed")

        self.state = state
        self.errors = list(errors)
