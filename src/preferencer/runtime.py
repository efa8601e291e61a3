"""Runtime support for generated preference classes.

Generated classes read through a Store and write through an Editor
obtained from store.edit(); edits take effect when the editor is applied.
Stores come from a StoreContext, which is what get_instance() and the
generated constructors receive.

This module also provides MemoryStore, a thread-safe in-memory Store.
It is useful for tests and for processes that don't need persistence:

    from preferencer.runtime import MemoryContext

    context = MemoryContext()
    settings = UserSettingsImpl.get_instance(context)
    settings.set_age(42)
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

DEFAULT_STORE_NAME = "default"


class MissingContextError(ValueError):
    """Raised when a generated class is constructed without a context."""


@runtime_checkable
class Editor(Protocol):
    """Pending changes to a Store, made visible by apply() or commit()."""

    def put_bool(self, key: str, value: bool) -> Editor: ...

    def put_int(self, key: str, value: int) -> Editor: ...

    def put_float(self, key: str, value: float) -> Editor: ...

    def put_str(self, key: str, value: str | None) -> Editor: ...

    def put_str_set(self, key: str, value: Iterable[str] | None) -> Editor: ...

    def remove(self, key: str) -> Editor: ...

    def clear(self) -> Editor: ...

    def apply(self) -> None:
        """Make the pending changes visible."""
        ...

    def commit(self) -> bool:
        """Like apply(), reporting whether the changes were stored."""
        ...


@runtime_checkable
class Store(Protocol):
    """String-keyed store with typed reads."""

    def get_bool(self, key: str, default: bool) -> bool: ...

    def get_int(self, key: str, default: int) -> int: ...

    def get_float(self, key: str, default: float) -> float: ...

    def get_str(self, key: str, default: str | None) -> str | None: ...

    def get_str_set(self, key: str, default: set[str] | None) -> set[str] | None: ...

    def contains(self, key: str) -> bool: ...

    def get_all(self) -> dict[str, Any]: ...

    def edit(self) -> Editor: ...


@runtime_checkable
class StoreContext(Protocol):
    """Source of stores for generated classes."""

    @property
    def default_store_name(self) -> str: ...

    def get_store(self, name: str) -> Store: ...


def get_default_store(context: StoreContext) -> Store:
    """Get the default store of a context."""
    return context.get_store(context.default_store_name)


# Pending editor operations: ("put", key, value) or ("remove", key, None)
_Operation = tuple[str, str, Any]


class MemoryEditor:
    """Editor for a MemoryStore.

    Operations are recorded in call order. On apply, a pending clear() runs
    first, then the puts and removes.
    """

    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self._operations: list[_Operation] = []
        self._clear = False

    def _put(self, key: str, value: Any) -> MemoryEditor:
        self._operations.append(("put", key, value))
        return self

    def put_bool(self, key: str, value: bool) -> MemoryEditor:
        return self._put(key, bool(value))

    def put_int(self, key: str, value: int) -> MemoryEditor:
        return self._put(key, int(value))

    def put_float(self, key: str, value: float) -> MemoryEditor:
        return self._put(key, float(value))

    def put_str(self, key: str, value: str | None) -> MemoryEditor:
        if value is None:
            return self.remove(key)
        return self._put(key, str(value))

    def put_str_set(self, key: str, value: Iterable[str] | None) -> MemoryEditor:
        if value is None:
            return self.remove(key)
        return self._put(key, frozenset(value))

    def remove(self, key: str) -> MemoryEditor:
        self._operations.append(("remove", key, None))
        return self

    def clear(self) -> MemoryEditor:
        self._clear = True
        return self

    def apply(self) -> None:
        self._store._apply(self._clear, self._operations)
        self._operations = []
        self._clear = False

    def commit(self) -> bool:
        self.apply()
        return True


class MemoryStore:
    """Thread-safe in-memory Store.

    Reading a key with a getter for another type raises TypeError.
    Listeners are called with each key changed by an apply, after the
    change is visible.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()
        self._listeners: list[Callable[[MemoryStore, str], None]] = []

    def _get(self, key: str, default: Any, expected: type | tuple[type, ...]) -> Any:
        with self._lock:
            if key not in self._values:
                return default
            value = self._values[key]
        # bool is an int subclass; keep the two apart
        if isinstance(value, bool) and expected is not bool:
            raise TypeError(f"Preference {key!r} holds a bool")
        if not isinstance(value, expected):
            raise TypeError(f"Preference {key!r} holds a {type(value).__name__}")
        return value

    def get_bool(self, key: str, default: bool) -> bool:
        return self._get(key, default, bool)

    def get_int(self, key: str, default: int) -> int:
        return self._get(key, default, int)

    def get_float(self, key: str, default: float) -> float:
        return self._get(key, default, float)

    def get_str(self, key: str, default: str | None) -> str | None:
        return self._get(key, default, str)

    def get_str_set(self, key: str, default: set[str] | None) -> set[str] | None:
        value = self._get(key, None, frozenset)
        return default if value is None else set(value)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def get_all(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._values)

    def edit(self) -> MemoryEditor:
        return MemoryEditor(self)

    def register_listener(self, listener: Callable[[MemoryStore, str], None]) -> None:
        self._listeners.append(listener)

    def unregister_listener(self, listener: Callable[[MemoryStore, str], None]) -> None:
        self._listeners.remove(listener)

    def _apply(self, clear: bool, operations: list[_Operation]) -> None:
        changed: list[str] = []
        with self._lock:
            if clear:
                changed.extend(self._values)
                self._values.clear()
            for action, key, value in operations:
                if action == "put":
                    self._values[key] = value
                else:
                    self._values.pop(key, None)
                if key not in changed:
                    changed.append(key)
        for key in changed:
            for listener in list(self._listeners):
                listener(self, key)


class MemoryContext:
    """StoreContext handing out one MemoryStore per name."""

    def __init__(
        self,
        default_store_name: str = DEFAULT_STORE_NAME,
        store_factory: Callable[[], MemoryStore] = MemoryStore,
    ) -> None:
        self._default_store_name = default_store_name
        self._store_factory = store_factory
        self._stores: dict[str, MemoryStore] = {}
        self._lock = threading.Lock()

    @property
    def default_store_name(self) -> str:
        return self._default_store_name

    def get_store(self, name: str) -> MemoryStore:
        with self._lock:
            if name not in self._stores:
                self._stores[name] = self._store_factory()
            return self._stores[name]


__all__ = [
    "DEFAULT_STORE_NAME",
    "Editor",
    "MemoryContext",
    "MemoryEditor",
    "MemoryStore",
    "MissingContextError",
    "Store",
    "StoreContext",
    "get_default_store",
]
