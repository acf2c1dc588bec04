"""Observable single-value cells.

A ``Signal`` holds one current value that can be read synchronously by calling
it; subscribers are called with the new value whenever it changes. A
``Computed`` re-derives its value from an explicit list of source signals and
only when one of those sources changes.
"""

from typing import Any, Callable, Generic, List, TypeVar

T = TypeVar("T")

Subscriber = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class ReadonlySignal(Generic[T]):
    """Read/subscribe view over a signal owned by someone else."""

    def __init__(self, source: "Signal[T]"):
        self._source = source

    def __call__(self) -> T:
        return self._source()

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        return self._source.subscribe(callback)


class Signal(Generic[T]):
    def __init__(self, value: T):
        self._value = value
        self._subscribers: List[Subscriber] = []

    def __call__(self) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def set(self, value: T) -> None:
        if value is self._value or value == self._value:
            return
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def as_readonly(self) -> ReadonlySignal[T]:
        return ReadonlySignal(self)


class Computed(ReadonlySignal[T]):
    """Value derived from ``sources`` by ``fn``; recomputed when a source changes."""

    def __init__(self, fn: Callable[[], T], *sources: Any):
        self._fn = fn
        self._cell: Signal[T] = Signal(fn())
        super().__init__(self._cell)
        self._unsubscribers = [source.subscribe(self._recompute) for source in sources]

    def _recompute(self, _value: Any) -> None:
        self._cell.set(self._fn())

    def dispose(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
