from ._errors import (
    InvalidActionError,
    ListenerError,
    ReentrantDispatchError,
    StoreError
)
from ._listeners import Listener, ListenerErrorPolicy, Subscription
from ._reducer import (
    Reducer,
    ReducerFunction,
    Reducible,
    StateReducer,
    matches_type,
    reducer_types
)
from ._settings import StoreSettings, get_settings
from ._store import (
    StateCopier,
    StateFactory,
    Store,
    copy_state,
    create_store
)


__all__ = (
    "InvalidActionError",
    "Listener",
    "ListenerError",
    "ListenerErrorPolicy",
    "Reducer",
    "ReducerFunction",
    "Reducible",
    "ReentrantDispatchError",
    "StateCopier",
    "StateFactory",
    "StateReducer",
    "Store",
    "StoreError",
    "StoreSettings",
    "Subscription",

    "copy_state",
    "create_store",
    "get_settings",
    "matches_type",
    "reducer_types"
)


__version__ = "0.1.0"
