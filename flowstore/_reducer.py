from __future__ import annotations

import inspect
import types

from inspect import Parameter, signature
from typing import (
    Annotated,
    Any,
    Callable,
    Generic,
    Literal,
    Optional,
    Protocol,
    Self,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable
)


__all__ = (
    "Reducer",
    "ReducerFunction",
    "Reducible",
    "StateReducer",

    "matches_type",
    "reducer_types"
)


A = TypeVar("A")
S = TypeVar("S")
A_contra = TypeVar("A_contra", contravariant=True)


ReducerFunction = Callable[[S, A], S]


class Reducer(Generic[S, A]):
    def apply(self, state: S, action: A) -> S:
        raise NotImplementedError

    def init(self) -> S:
        raise NotImplementedError

    def __call__(self, state: S, action: A) -> S:
        return self.apply(state, action)


@runtime_checkable
class Reducible(Protocol[A_contra]):
    def reduce(self, action: A_contra) -> Optional[Self]:
        ...


class StateReducer(Reducer[S, A]):
    """Adapts a state type that reduces itself into a reducer.

    ``reduce`` may return a new state, or mutate ``self`` and return it (or
    ``None``). The store always passes a private copy, so a ``reduce`` that
    raises halfway through never leaks its partial writes.
    """

    def __init__(self, state_type: type[S]) -> None:
        if not callable(getattr(state_type, "reduce", None)):
            raise TypeError(
                f"{state_type.__qualname__} does not implement reduce()"
            )

        self.state_type = state_type

    def apply(self, state: S, action: A) -> S:
        result = state.reduce(action)  # type: ignore[attr-defined]

        if result is None:
            return state

        return result

    def init(self) -> S:
        return self.state_type()

    def __repr__(self) -> str:
        return f"StateReducer({self.state_type.__qualname__})"


_MISSING = object()


def _parameter_hints(
    function: Callable[..., Any],
    unbound: bool = False
) -> list[Any]:
    target = inspect.unwrap(getattr(function, "__func__", function))

    try:
        hints = get_type_hints(target)
    except NameError as error:
        raise TypeError(
            f"Could not resolve reducer annotations: {error}"
        ) from error

    parameters = [
        parameter
        for parameter in signature(function).parameters.values()
        if parameter.kind in (
            Parameter.POSITIONAL_ONLY,
            Parameter.POSITIONAL_OR_KEYWORD
        )
    ]

    # Methods looked up on the class still list self.
    if unbound:
        parameters = parameters[1:]

    return [hints.get(parameter.name, _MISSING) for parameter in parameters]


def _generic_args(reducer: Reducer) -> Optional[tuple[Any, Any]]:
    for cls in type(reducer).__mro__:
        for base in getattr(cls, "__orig_bases__", ()):
            if get_origin(base) is not Reducer:
                continue

            args = get_args(base)

            if not any(isinstance(arg, TypeVar) for arg in args):
                return args[0], args[1]

    return None


def _annotated_types(reducer: Any) -> tuple[Any, Any]:
    if isinstance(reducer, StateReducer):
        hints = _parameter_hints(reducer.state_type.reduce, unbound=True)

        return reducer.state_type, hints[0] if hints else _MISSING

    if isinstance(reducer, Reducer):
        args = _generic_args(reducer)

        if args is not None:
            return args

        hints = _parameter_hints(type(reducer).apply, unbound=True)
    elif inspect.isroutine(reducer):
        hints = _parameter_hints(reducer)
    else:
        hints = _parameter_hints(type(reducer).__call__, unbound=True)

    if len(hints) < 2:
        raise TypeError("Reducer must accept a state and an action")

    return hints[0], hints[1]


def reducer_types(
    reducer: Any,
    state_type: Any = None,
    action_type: Any = None
) -> tuple[Any, Any]:
    if state_type is not None and action_type is not None:
        return state_type, action_type

    annotated_state, annotated_action = _annotated_types(reducer)

    state_type = state_type if state_type is not None else annotated_state
    action_type = action_type if action_type is not None else annotated_action

    if _MISSING in (state_type, action_type):
        raise TypeError("Reducer must have type annotations")

    return state_type, action_type


def matches_type(value: Any, annotation: Any) -> bool:
    if get_origin(annotation) is Annotated:
        return matches_type(value, get_args(annotation)[0])

    if annotation is Any or annotation is object:
        return True

    if isinstance(annotation, TypeVar):
        return True

    origin = get_origin(annotation)

    if origin is Union or origin is types.UnionType:
        return any(matches_type(value, arg) for arg in get_args(annotation))

    if origin is Literal:
        return value in get_args(annotation)

    if origin is not None:
        annotation = origin

    if not isinstance(annotation, type):
        return True

    # Only runtime-checkable protocols support isinstance().
    if getattr(annotation, "_is_protocol", False) and \
            not getattr(annotation, "_is_runtime_protocol", False):
        return True

    return isinstance(value, annotation)
