"""Concurrency tests for serialized dispatch."""

import threading
import time

from pydantic import BaseModel

from flowstore import create_store

from .models import Increment, Insert, TodoState


class Pair(BaseModel):
    left: int = 0
    right: int = 0


def pair_reducer(state: Pair, action: Increment) -> Pair:
    state.left += action.by
    time.sleep(0.0005)
    state.right += action.by

    return state


def test_concurrent_increments_are_not_lost(counter_store):
    threads_count = 8
    per_thread = 50
    start = threading.Barrier(threads_count)

    def worker() -> None:
        start.wait()

        for _ in range(per_thread):
            counter_store.dispatch(Increment())

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert counter_store.get_state().value == threads_count * per_thread


def test_readers_never_see_torn_state():
    store = create_store(pair_reducer)
    stop = threading.Event()
    torn: list[Pair] = []

    def reader() -> None:
        while not stop.is_set():
            state = store.get_state()

            if state.left != state.right:
                torn.append(state)

    readers = [threading.Thread(target=reader) for _ in range(2)]
    for th in readers:
        th.start()

    writers = [
        threading.Thread(
            target=lambda: [store.dispatch(Increment()) for _ in range(20)]
        )
        for _ in range(4)
    ]
    for th in writers:
        th.start()
    for th in writers:
        th.join()

    stop.set()
    for th in readers:
        th.join()

    assert torn == []
    assert store.get_state() == Pair(left=80, right=80)


def test_listener_dispatch_from_another_thread():
    store = create_store(TodoState)

    def listener() -> None:
        if len(store.get_state().todos) < 2:
            store.dispatch(Insert(name="Add-on to g-shopping"))

    store.subscribe(listener)

    th = threading.Thread(
        target=store.dispatch,
        args=(Insert(name="Grocery shopping"),)
    )
    th.start()
    th.join()

    assert store.get_state().todos == [
        "Grocery shopping",
        "Add-on to g-shopping"
    ]


def test_listeners_called_once_per_dispatch(counter_store):
    count = 0
    lock = threading.Lock()

    def listener() -> None:
        nonlocal count

        with lock:
            count += 1

    counter_store.subscribe(listener)

    threads = [
        threading.Thread(target=counter_store.dispatch, args=(Increment(),))
        for _ in range(16)
    ]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert count == 16
    assert counter_store.get_state().value == 16


def test_concurrent_cancel_of_one_handle(counter_store):
    threads_count = 8
    start = threading.Barrier(threads_count)
    errors: list[BaseException] = []

    for _ in range(50):
        subscription = counter_store.subscribe(lambda: None)

        def worker() -> None:
            start.wait()

            try:
                subscription.cancel()
            except Exception as error:
                errors.append(error)

        threads = [
            threading.Thread(target=worker) for _ in range(threads_count)
        ]
        for th in threads:
            th.start()
        for th in threads:
            th.join()

    assert errors == []
    assert counter_store.listeners == ()
