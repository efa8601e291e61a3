"""Preference models from TOML descriptions.

A description file declares one or more classes, each with its
preferences in declaration order:

```toml
[[class]]
source = "myapp.settings:UserSettings"
name = "UserSettingsImpl"             # default: source name + class_suffix
interface = false
store = "user"                        # omitted: the context's default store
post_construct = { method = "on_created", inject_context = true }

[[class.preference]]
name = "age"
type = "int"
key = "age"                           # default: name
default = "18"                        # default: the type's canonical default
getter = "get_age"                    # default: "get" + method suffix of name
visibility = "public"
setter = true                         # or "update_age", or { name = ..., visibility = ... }
remover = false
line = 12
```
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from preferencer.config import PreferencerConfig
from preferencer.errors import ModelError
from preferencer.model import (
    GeneratedMethod,
    MethodCapability,
    PostConstructHook,
    Preference,
    PreferenceClass,
    SourceLocation,
    TypeRef,
    Visibility,
)

logger = logging.getLogger(__name__)

GETTER_PREFIX = "get"


def _visibility(value: Any, location: SourceLocation) -> Visibility:
    try:
        return Visibility(value)
    except ValueError:
        raise ModelError(f"Unknown visibility {value!r}", location) from None


def _flag(data: dict[str, Any], key: str, location: SourceLocation) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ModelError(f"{key!r} must be true or false, not {value!r}", location)
    return value


def _generated_method(value: Any, location: SourceLocation) -> GeneratedMethod:
    """Parse a setter/remover entry: bool, method name, or table."""
    if value is None or value is False:
        return GeneratedMethod.skip()
    if value is True:
        return GeneratedMethod.canonical()
    if isinstance(value, str):
        return GeneratedMethod.override(MethodCapability(value))
    if isinstance(value, dict) and "name" in value:
        return GeneratedMethod.override(
            MethodCapability(
                source_name=value["name"],
                visibility=_visibility(value.get("visibility", "public"), location),
            )
        )
    raise ModelError(f"Invalid method declaration {value!r}", location)


def _post_construct(value: Any, location: SourceLocation) -> PostConstructHook | None:
    if value is None:
        return None
    if isinstance(value, str):
        return PostConstructHook(value)
    if isinstance(value, dict) and "method" in value:
        return PostConstructHook(value["method"], _flag(value, "inject_context", location))
    raise ModelError(f"Invalid post_construct {value!r}", location)


def parse_preference(
    data: dict[str, Any], config: PreferencerConfig, file: Path | None
) -> Preference:
    location = SourceLocation(file, data.get("line"))
    for required in ("name", "type"):
        if required not in data:
            raise ModelError(f"Preference is missing {required!r}", location)

    name = data["name"]
    getter = data.get("getter") or GETTER_PREFIX + config.build_naming().method_suffix(name)
    return Preference(
        name=name,
        value_type=data["type"],
        accessor=MethodCapability(
            source_name=getter,
            visibility=_visibility(data.get("visibility", "public"), location),
        ),
        key=data.get("key"),
        default_value=str(data.get("default", "")),
        setter=_generated_method(data.get("setter"), location),
        remover=_generated_method(data.get("remover"), location),
        location=location,
    )


def parse_class(
    data: dict[str, Any], config: PreferencerConfig, file: Path | None
) -> PreferenceClass:
    location = SourceLocation(file, data.get("line"))
    if "source" not in data:
        raise ModelError("Class is missing 'source'", location)

    try:
        source = TypeRef.parse(data["source"])
    except ModelError as e:
        raise ModelError(str(e), location) from None
    store = data.get("store")
    return PreferenceClass(
        source=source,
        name=data.get("name") or source.name + config.class_suffix,
        preferences=tuple(
            parse_preference(p, config, file) for p in data.get("preference", [])
        ),
        is_interface=_flag(data, "interface", location),
        use_default_store=store is None,
        store_name=store,
        post_construct=_post_construct(data.get("post_construct"), location),
        location=location,
    )


def parse_model(
    data: dict[str, Any],
    config: PreferencerConfig | None = None,
    file: Path | None = None,
) -> list[PreferenceClass]:
    """Build preference classes from parsed TOML data.

    Raises:
        ModelError: If a class or preference is malformed
    """
    config = config or PreferencerConfig()
    classes = [parse_class(c, config, file) for c in data.get("class", [])]
    logger.debug("Parsed %d preference classes", len(classes))
    return classes


def load_model(path: Path, config: PreferencerConfig | None = None) -> list[PreferenceClass]:
    """Load preference classes from a TOML description file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ModelError: If the file is not valid TOML or is malformed
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ModelError(f"Invalid TOML: {e}", SourceLocation(path)) from e

    return parse_model(data, config, path)


__all__ = ["load_model", "parse_class", "parse_model", "parse_preference"]
