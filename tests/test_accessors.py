"""Tests for getter, setter and remover synthesis."""

import ast

import pytest

from preferencer.errors import UnsupportedTypeError
from preferencer.gen.accessors import (
    ResolvedPreference,
    effective_default,
    generate_getter,
    generate_preference_methods,
    generate_remover,
    generate_setter,
    resolve_preferences,
    string_literal,
)
from preferencer.gen.structure import MethodKind
from preferencer.model import (
    GeneratedMethod,
    MethodCapability,
    Preference,
    PreferenceClass,
    TypeRef,
    Visibility,
)
from preferencer.naming import CamelCaseNaming, SnakeCaseNaming
from preferencer.resolver import PreferenceResolver


def _resolve(preference) -> ResolvedPreference:
    return ResolvedPreference(preference, PreferenceResolver().resolve(preference.value_type))


# =============================================================================
# Getters
# =============================================================================


class TestGetter:
    def test_canonical_default(self, preference_factory):
        getter = generate_getter(_resolve(preference_factory("age")))
        assert getter.name == "get_age"
        assert getter.kind is MethodKind.GETTER
        assert getter.returns == "int"
        assert getter.body == ('return self._store.get_int("age", 0)',)

    def test_explicit_default(self, preference_factory):
        resolved = _resolve(preference_factory("token", "str", default='"abc"'))
        assert effective_default(resolved) == '"abc"'
        assert generate_getter(resolved).body == ('return self._store.get_str("token", "abc")',)

    def test_custom_key(self, preference_factory):
        getter = generate_getter(_resolve(preference_factory("age", key="user_age")))
        assert '"user_age"' in getter.body[0]

    def test_key_outside_basic_plane(self, preference_factory):
        getter = generate_getter(_resolve(preference_factory("x", key="k\U0001F600")))
        assert getter.body == ('return self._store.get_int("k\U0001F600", 0)',)

    def test_copies_accessor_capability(self):
        preference = Preference(
            name="age",
            value_type="int",
            accessor=MethodCapability(
                "_age", Visibility.PROTECTED, is_override=True, is_abstract=True
            ),
        )
        getter = generate_getter(_resolve(preference))
        assert getter.name == "_age"
        assert getter.visibility is Visibility.PROTECTED
        assert getter.is_override is True


# =============================================================================
# Setters and removers
# =============================================================================


class TestSetter:
    def test_canonical_name_is_public(self, preference_factory):
        naming = SnakeCaseNaming()
        setter = generate_setter(_resolve(preference_factory("userName", "str")), naming)
        assert setter.name == "set" + naming.method_suffix("userName")
        assert setter.name == "set_user_name"
        assert setter.visibility is Visibility.PUBLIC
        assert setter.is_override is False

    def test_parameter(self, preference_factory):
        setter = generate_setter(_resolve(preference_factory("userName", "str")), SnakeCaseNaming())
        assert len(setter.parameters) == 1
        assert setter.parameters[0].name == "user_name"
        assert setter.parameters[0].type_hint == "str"
        assert setter.returns == "None"

    def test_body_applies_without_transaction(self, preference_factory):
        setter = generate_setter(_resolve(preference_factory("age")), SnakeCaseNaming())
        assert setter.body == (
            "transaction = self._current_transaction",
            "editor = transaction.editor if transaction is not None else self._store.edit()",
            'editor.put_int("age", age)',
            "if transaction is None:",
            "    editor.apply()",
        )

    def test_override_name_and_visibility(self, preference_factory):
        declared = MethodCapability("update_age", Visibility.PROTECTED, is_abstract=True)
        preference = preference_factory("age", setter=GeneratedMethod.override(declared))
        setter = generate_setter(_resolve(preference), SnakeCaseNaming())
        assert setter.name == "update_age"
        assert setter.visibility is Visibility.PROTECTED
        assert setter.is_override is True

    def test_parameter_avoids_body_locals(self, preference_factory):
        setter = generate_setter(_resolve(preference_factory("editor", "str")), SnakeCaseNaming())
        assert setter.parameters[0].name == "editor_value"
        assert 'editor.put_str("editor", editor_value)' in setter.body

    def test_token_scenario_camel_case(self, preference_factory):
        preference = preference_factory("Token", "str", key="token", default='"abc"')
        setter = generate_setter(_resolve(preference), CamelCaseNaming())
        assert setter.name == "setToken"
        assert setter.parameters[0].name == "token"
        assert setter.parameters[0].type_hint == "str"
        assert 'editor.put_str("token", token)' in setter.body


class TestRemover:
    def test_canonical(self, preference_factory):
        preference = preference_factory("age", remover=GeneratedMethod.canonical())
        remover = generate_remover(_resolve(preference), SnakeCaseNaming())
        assert remover.name == "remove_age"
        assert remover.kind is MethodKind.REMOVER
        assert remover.parameters == ()
        assert 'editor.remove("age")' in remover.body
        assert remover.body[-2:] == ("if transaction is None:", "    editor.apply()")

    def test_override(self, preference_factory):
        declared = MethodCapability("forget_age", Visibility.PRIVATE)
        preference = preference_factory("age", remover=GeneratedMethod.override(declared))
        remover = generate_remover(_resolve(preference), CamelCaseNaming())
        assert remover.name == "forget_age"
        assert remover.visibility is Visibility.PRIVATE


class TestPreferenceMethods:
    def test_groups_in_declaration_order(self, preference_factory):
        preferences = [
            preference_factory("b", remover=GeneratedMethod.canonical()),
            preference_factory("a", setter=GeneratedMethod.skip()),
        ]
        methods = generate_preference_methods([_resolve(p) for p in preferences], SnakeCaseNaming())
        assert [m.name for m in methods] == ["get_b", "set_b", "remove_b", "get_a"]

    def test_age_scenario(self, preference_factory):
        preference = preference_factory("Age", getter="getAge", key="age")
        methods = generate_preference_methods([_resolve(preference)], CamelCaseNaming())
        assert methods[0].name == "getAge"
        assert methods[0].body == ('return self._store.get_int("age", 0)',)
        assert methods[1].name == "setAge"


# =============================================================================
# Resolution
# =============================================================================


class TestResolvePreferences:
    def test_resolves_all(self, user_settings):
        resolved = resolve_preferences(user_settings, PreferenceResolver())
        assert [r.method.get for r in resolved] == [
            "get_int",
            "get_str",
            "get_bool",
            "get_str_set",
        ]

    def test_unsupported_type(self, preference_factory):
        clazz = PreferenceClass(
            source=TypeRef("app", "Settings"),
            name="SettingsImpl",
            preferences=(preference_factory("age"), preference_factory("blob", "bytes")),
        )
        with pytest.raises(UnsupportedTypeError) as exc:
            resolve_preferences(clazz, PreferenceResolver())
        assert exc.value.value_type == "bytes"
        assert exc.value.class_name == "SettingsImpl"
        assert "bytes" in str(exc.value)
        assert "SettingsImpl" in str(exc.value)


class TestStringLiteral:
    def test_plain(self):
        assert string_literal("age") == '"age"'

    def test_round_trips(self):
        texts = ["k\U0001F600", 'say "hi"', "it's", "both ' and \"", "tab\there", "back\\slash"]
        for text in texts:
            assert ast.literal_eval(string_literal(text)) == text
