from __future__ import annotations

import copy
import logging
import threading

from typing import Any, Callable, Generic, Iterable, Optional, TypeVar, Union

from pydantic import BaseModel

from ._errors import InvalidActionError, ListenerError, ReentrantDispatchError
from ._listeners import Listener, ListenerErrorPolicy, Subscription, notify
from ._reducer import (
    Reducer,
    ReducerFunction,
    StateReducer,
    matches_type,
    reducer_types
)
from ._settings import get_settings


__all__ = (
    "StateCopier",
    "StateFactory",
    "Store",

    "copy_state",
    "create_store"
)


logger = logging.getLogger(__name__)


A = TypeVar("A")
S = TypeVar("S")


StateFactory = Callable[[], S]
StateCopier = Callable[[S], S]


def copy_state(state: S) -> S:
    if isinstance(state, BaseModel):
        return state.model_copy(deep=True)

    return copy.deepcopy(state)


class Store(Generic[S, A]):
    state_type: Any
    action_type: Any

    _reducer: Callable[[S, A], S]
    _state: S

    _subscriptions: list[Subscription]

    _lock: threading.RLock
    _reducing_thread: Optional[int]

    _copy_state: StateCopier
    _copy_on_read: bool
    _check_action_types: bool
    _listener_error_policy: ListenerErrorPolicy

    def __init__(
        self,
        reducer: Callable[[S, A], S],
        *,
        state_type: Any,
        action_type: Any,
        initial_state: Optional[S] = None,
        listeners: Iterable[Listener] = (),
        state_copier: Optional[StateCopier] = None,
        listener_error_policy: Optional[ListenerErrorPolicy] = None,
        check_action_types: Optional[bool] = None,
        copy_on_read: Optional[bool] = None
    ) -> None:
        settings = get_settings()

        self.state_type = state_type
        self.action_type = action_type

        self._reducer = reducer

        self._copy_state = state_copier or copy_state
        self._copy_on_read = settings.copy_on_read \
            if copy_on_read is None else copy_on_read
        self._check_action_types = settings.check_action_types \
            if check_action_types is None else check_action_types
        self._listener_error_policy = ListenerErrorPolicy(
            listener_error_policy or settings.listener_error_policy
        )

        self._lock = threading.RLock()
        self._reducing_thread = None

        self._subscriptions = []

        if initial_state is None:
            self._state = self._default_state()
        else:
            self._state = self._copy_state(initial_state)

        for listener in listeners:
            self.subscribe(listener)

        logger.debug("Created store for %r with %r", state_type, reducer)

    def _default_state(self) -> S:
        reducer = self._reducer

        if isinstance(reducer, Reducer) and \
                type(reducer).init is not Reducer.init:
            return reducer.init()

        if not isinstance(self.state_type, type):
            raise TypeError(
                "An initial state is required when the state type "
                f"{self.state_type!r} is not a class"
            )

        return self.state_type()

    def _read(self, state: S) -> S:
        if self._copy_on_read:
            return self._copy_state(state)

        return state

    def dispatch(self, action: A) -> S:
        if self._check_action_types and \
                not matches_type(action, self.action_type):
            raise InvalidActionError(action, self.action_type)

        with self._lock:
            if self._reducing_thread == threading.get_ident():
                raise ReentrantDispatchError

            self._reducing_thread = threading.get_ident()

            try:
                state = self._reducer(self._copy_state(self._state), action)
            finally:
                self._reducing_thread = None

            self._state = state
            subscriptions = tuple(self._subscriptions)
            committed = self._read(state)

        logger.debug(
            "Committed %s, notifying %d listener(s)",
            type(action).__qualname__,
            len(subscriptions)
        )

        errors = notify(subscriptions, self._listener_error_policy)

        if errors and \
                self._listener_error_policy is ListenerErrorPolicy.COLLECT:
            raise ListenerError(committed, errors) from errors[0]

        return committed

    def get_state(self) -> S:
        with self._lock:
            return self._read(self._state)

    def subscribe(self, listener: Listener) -> Subscription:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {listener!r}")

        subscription = Subscription(listener, self._unsubscribe)

        with self._lock:
            self._subscriptions.append(subscription)

        logger.debug("Subscribed %r", listener)

        return subscription

    def _unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            # Concurrent cancel() calls on one handle can both get here.
            if subscription not in self._subscriptions:
                return

            self._subscriptions.remove(subscription)

        logger.debug("Unsubscribed %r", subscription.listener)

    @property
    def listeners(self) -> tuple[Listener, ...]:
        with self._lock:
            return tuple(s.listener for s in self._subscriptions)


def create_store(
    reducer: Union[ReducerFunction, Reducer, type],
    initial_state: Optional[S] = None,
    initial_state_factory: Optional[StateFactory] = None,
    listeners: Iterable[Listener] = (),
    state_type: Any = None,
    action_type: Any = None,
    state_copier: Optional[StateCopier] = None,
    listener_error_policy: Optional[ListenerErrorPolicy] = None,
    check_action_types: Optional[bool] = None,
    copy_on_read: Optional[bool] = None
) -> Store[S, A]:
    if isinstance(reducer, type):
        if issubclass(reducer, Reducer):
            reducer = reducer()
        else:
            reducer = StateReducer(reducer)

    state_type, action_type = reducer_types(reducer, state_type, action_type)

    if initial_state is None and initial_state_factory is not None:
        initial_state = initial_state_factory()

    return Store[state_type, action_type](  # type: ignore[valid-type]
        reducer,
        state_type=state_type,
        action_type=action_type,
        initial_state=initial_state,
        listeners=listeners,
        state_copier=state_copier,
        listener_error_policy=listener_error_policy,
        check_action_types=check_action_types,
        copy_on_read=copy_on_read
    )
