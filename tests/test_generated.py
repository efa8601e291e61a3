"""End-to-end tests: generated classes running against MemoryStore."""

import threading
from dataclasses import replace

import pytest

from preferencer.gen import PreferenceGenerator, render_module
from preferencer.model import (
    MethodCapability,
    PostConstructHook,
    Preference,
    PreferenceClass,
    TypeRef,
)
from preferencer.runtime import MemoryContext, MemoryEditor, MemoryStore, MissingContextError


class CountingEditor(MemoryEditor):
    def __init__(self, store: "CountingStore") -> None:
        super().__init__(store)
        self.counting_store = store

    def apply(self) -> None:
        self.counting_store.applies += 1
        super().apply()


class CountingStore(MemoryStore):
    """MemoryStore that counts applied editors."""

    def __init__(self) -> None:
        super().__init__()
        self.applies = 0

    def edit(self) -> CountingEditor:
        return CountingEditor(self)


@pytest.fixture
def generate_module(load_generated):
    def generate(clazz: PreferenceClass):
        source = render_module(PreferenceGenerator().generate(clazz))
        return load_generated("usersettings_impl", source)

    return generate


@pytest.fixture
def impl_class(user_settings, generate_module):
    return generate_module(user_settings).UserSettingsImpl


@pytest.fixture
def context() -> MemoryContext:
    return MemoryContext(store_factory=CountingStore)


@pytest.fixture
def store(context) -> CountingStore:
    return context.get_store(context.default_store_name)


@pytest.fixture
def settings(impl_class, context):
    return impl_class(context)


# =============================================================================
# Accessors
# =============================================================================


class TestAccessors:
    def test_defaults(self, settings):
        assert settings.get_age() == 0
        assert settings.get_token() == "abc"
        assert settings.is_enabled() is False
        assert settings.get_tags() is None

    def test_set_and_get(self, settings):
        settings.set_age(42)
        settings.set_token("xyz")
        settings.enable(True)
        settings.set_tags({"a", "b"})

        assert settings.get_age() == 42
        assert settings.get_token() == "xyz"
        assert settings.is_enabled() is True
        assert settings.get_tags() == {"a", "b"}

    def test_remove_restores_default(self, settings, store):
        settings.set_token("xyz")
        settings.remove_token()
        assert settings.get_token() == "abc"
        assert not store.contains("token")

    def test_key_outside_basic_plane(self, user_settings, generate_module, context, store):
        age = replace(user_settings.preferences[0], key="k\U0001F600")
        clazz = replace(user_settings, preferences=(age, *user_settings.preferences[1:]))
        settings = generate_module(clazz).UserSettingsImpl(context)

        store.edit().put_int("k\U0001F600", 5).apply()
        assert settings.get_age() == 5
        settings.set_age(6)
        assert store.get_int("k\U0001F600", 0) == 6

    def test_direct_writes_apply_once_each(self, settings, store):
        settings.set_age(1)
        settings.set_token("x")
        settings.remove_tags()
        assert store.applies == 3


# =============================================================================
# Transactions
# =============================================================================


class TestTransactions:
    def test_commit_applies_once(self, settings, store):
        transaction = settings.begin_transaction()
        settings.set_age(1)
        settings.set_token("x")
        settings.enable(True)
        settings.remove_tags()

        assert store.applies == 0
        assert settings.get_age() == 0

        transaction.commit()
        assert store.applies == 1
        assert settings.get_age() == 1
        assert settings.get_token() == "x"
        assert settings.is_enabled() is True

    def test_rollback_applies_nothing(self, settings, store):
        settings.set_age(1)
        transaction = settings.begin_transaction()
        settings.set_age(2)
        settings.remove_token()
        transaction.rollback()

        assert store.applies == 1
        assert settings.get_age() == 1

    def test_idle_after_commit(self, settings, store):
        settings.begin_transaction().commit()
        assert settings._current_transaction is None
        settings.set_age(5)
        assert settings.get_age() == 5

    def test_second_begin_replaces_first(self, settings):
        first = settings.begin_transaction()
        second = settings.begin_transaction()
        assert settings._current_transaction is second

        settings.set_age(3)
        first.commit()
        assert settings._current_transaction is second
        assert settings.get_age() == 0

        second.commit()
        assert settings.get_age() == 3
        assert settings._current_transaction is None

    def test_with_commits(self, settings):
        with settings.begin_transaction():
            settings.set_age(9)
            assert settings.get_age() == 0
        assert settings.get_age() == 9
        assert settings._current_transaction is None

    def test_with_rolls_back_on_error(self, settings):
        with pytest.raises(RuntimeError):
            with settings.begin_transaction():
                settings.set_age(9)
                raise RuntimeError("boom")
        assert settings.get_age() == 0
        assert settings._current_transaction is None

    def test_clear_leaves_transaction_open(self, settings, store):
        settings.set_age(1)
        transaction = settings.begin_transaction()
        settings.set_token("x")
        settings.clear()

        assert store.get_all() == {}
        assert settings._current_transaction is transaction

        transaction.commit()
        assert settings.get_token() == "x"
        assert settings.get_age() == 0


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    def test_missing_context(self, impl_class):
        with pytest.raises(MissingContextError):
            impl_class(None)

    def test_missing_context_is_value_error(self, impl_class):
        with pytest.raises(ValueError, match="Context must not be None"):
            impl_class(None)

    def test_post_construct_hook(self, impl_class, context):
        settings = impl_class(context)
        assert settings.context is context
        assert impl_class.created == 1

    def test_named_store(self, user_settings, generate_module):
        clazz = replace(user_settings, use_default_store=False, store_name="user")
        impl = generate_module(clazz).UserSettingsImpl
        context = MemoryContext()

        impl(context).set_age(7)
        assert context.get_store("user").get_int("age", 0) == 7
        assert not context.get_store(context.default_store_name).contains("age")

    def test_named_store_outside_basic_plane(self, user_settings, generate_module):
        clazz = replace(user_settings, use_default_store=False, store_name="s\U0001F600")
        context = MemoryContext()
        generate_module(clazz).UserSettingsImpl(context).set_age(7)
        assert context.get_store("s\U0001F600").get_int("age", 0) == 7

    def test_base_init_runs_before_hook(self, load_generated):
        base_source = (
            "class Base:\n"
            "    def __init__(self):\n"
            "        self.ready = True\n"
            "\n"
            "    def get_level(self) -> int: ...\n"
            "\n"
            "    def on_created(self):\n"
            "        self.ready_at_hook = self.ready\n"
        )
        clazz = PreferenceClass(
            source=TypeRef("base_src", "Base"),
            name="BaseImpl",
            preferences=(
                Preference(name="level", value_type="int", accessor=MethodCapability("get_level")),
            ),
            post_construct=PostConstructHook("on_created"),
        )
        source = render_module(PreferenceGenerator().generate(clazz))
        module = load_generated("base_impl", source, extra={"base_src": base_source})

        impl = module.BaseImpl(MemoryContext())
        assert impl.ready is True
        assert impl.ready_at_hook is True
        assert impl.get_level() == 0

    def test_get_instance_returns_same(self, impl_class, context):
        first = impl_class.get_instance(context)
        assert impl_class.get_instance(context) is first
        assert impl_class.get_instance(MemoryContext()) is first

    def test_get_instance_concurrent(self, impl_class, context):
        barrier = threading.Barrier(8)
        instances = []

        def worker():
            barrier.wait()
            instances.append(impl_class.get_instance(context))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len({id(i) for i in instances}) == 1
        assert impl_class.created == 1


class TestProtocolSource:
    def test_implements_protocol(self, load_generated):
        flags_source = (
            "from typing import Protocol\n"
            "\n"
            "\n"
            "class Flags(Protocol):\n"
            "    def is_beta(self) -> bool: ...\n"
        )
        clazz = PreferenceClass(
            source=TypeRef("flags_src", "Flags"),
            name="FlagsImpl",
            preferences=(
                Preference(name="beta", value_type="bool", accessor=MethodCapability("is_beta")),
            ),
            is_interface=True,
        )
        source = render_module(PreferenceGenerator().generate(clazz))
        module = load_generated("flags_impl", source, extra={"flags_src": flags_source})

        flags = module.FlagsImpl(MemoryContext())
        assert flags.is_beta() is False
        assert module.Flags in module.FlagsImpl.__mro__
        assert not hasattr(flags, "set_beta")
