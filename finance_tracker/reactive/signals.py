"""
Reactive Primitives

Three building blocks for push-based recomputation:

- Signal:   a mutable value holder that notifies subscribers on change
- Computed: a value derived from explicit sources, never stale on read
- effect:   a side effect re-run whenever its sources change

Dependencies are declared explicitly when a Computed or effect is
created; there is no implicit dependency tracking.

Every Signal carries a version counter. A Computed remembers the
versions of its sources at its last evaluation and recomputes on read
only when one of them moved, so reads always reflect the latest
committed value of every source.
"""

from typing import Any, Callable, Generic, Hashable, Iterable, TypeVar, Union

import structlog

T = TypeVar("T")

Unsubscribe = Callable[[], None]

logger = structlog.get_logger(__name__)


class _Subscribers:
    """Ordered list of callbacks; a failing callback never blocks the others."""

    def __init__(self, owner: str):
        self._owner = owner
        self._callbacks: list[Callable[[Any], None]] = []

    def add(self, callback: Callable[[Any], None]) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def notify(self, value: Any) -> None:
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception:
                logger.exception(
                    "subscriber_failed",
                    source=self._owner,
                    callback=getattr(callback, "__qualname__", repr(callback)),
                )

    def __len__(self) -> int:
        return len(self._callbacks)


class Signal(Generic[T]):
    """
    A writable reactive value.

    Reading: ``signal()`` or ``signal.get()``
    Writing: ``signal.set(value)`` or ``signal.update(fn)``
    """

    def __init__(self, value: T, name: str = "signal"):
        self._value = value
        self._version = 0
        self.name = name
        self._subscribers = _Subscribers(name)

    def __call__(self) -> T:
        return self._value

    def get(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        """Incremented on every committed change."""
        return self._version

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers (no-op for the identical object)."""
        if value is self._value:
            return
        self._value = value
        self._version += 1
        self._subscribers.notify(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Call ``callback(new_value)`` after every change."""
        return self._subscribers.add(callback)

    def as_readonly(self) -> "ReadonlySignal[T]":
        return ReadonlySignal(self)

    def __repr__(self) -> str:
        return f"Signal({self.name}={self._value!r}, version={self._version})"


class ReadonlySignal(Generic[T]):
    """Read and subscribe access to a Signal owned by someone else."""

    def __init__(self, source: Signal[T]):
        self._source = source

    def __call__(self) -> T:
        return self._source()

    def get(self) -> T:
        return self._source()

    @property
    def version(self) -> int:
        return self._source.version

    @property
    def name(self) -> str:
        return self._source.name

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        return self._source.subscribe(callback)

    def __repr__(self) -> str:
        return f"ReadonlySignal({self._source.name}={self._source()!r})"


Source = Union[Signal, ReadonlySignal, "Computed"]


class Computed(Generic[T]):
    """
    A value derived from one or more sources.

    The function is evaluated lazily on read and re-evaluated only when
    a source version changed since the previous evaluation. Subscribers
    receive the fresh value each time any source changes.
    """

    def __init__(self, fn: Callable[[], T], *sources: Source, name: str = "computed"):
        if not sources:
            raise ValueError("Computed needs at least one source")
        self._fn = fn
        self._sources = sources
        self.name = name
        self._seen: Hashable = None
        self._value: T
        self._subscribers = _Subscribers(name)
        self._source_unsubscribes: list[Unsubscribe] = []

    @property
    def version(self) -> tuple:
        """Composite of the source versions; changes whenever any source does."""
        return tuple(source.version for source in self._sources)

    def __call__(self) -> T:
        current = self.version
        if current != self._seen:
            self._value = self._fn()
            self._seen = current
        return self._value

    def get(self) -> T:
        return self()

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Push the recomputed value to ``callback`` whenever a source changes."""
        if not self._source_unsubscribes:
            for source in self._sources:
                self._source_unsubscribes.append(source.subscribe(self._on_source_change))
        unsubscribe = self._subscribers.add(callback)

        def release() -> None:
            unsubscribe()
            if not len(self._subscribers):
                for stop in self._source_unsubscribes:
                    stop()
                self._source_unsubscribes.clear()

        return release

    def _on_source_change(self, _value: Any) -> None:
        self._subscribers.notify(self())

    def __repr__(self) -> str:
        return f"Computed({self.name}, sources={[s.name for s in self._sources]})"


def effect(fn: Callable[[], None], *sources: Source) -> Unsubscribe:
    """
    Run ``fn`` now and again after every change of any source.

    Returns a dispose function that stops further runs.
    """
    if not sources:
        raise ValueError("effect needs at least one source")

    fn()
    unsubscribes: Iterable[Unsubscribe] = [
        source.subscribe(lambda _value: fn()) for source in sources
    ]

    def dispose() -> None:
        for stop in unsubscribes:
            stop()

    return dispose
