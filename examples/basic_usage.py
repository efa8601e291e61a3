#!/usr/bin/env python3
"""Basic usage example for preferencer.

This example demonstrates:
- Generating an accessor class from a TOML description
- Direct writes, which apply immediately
- Transactions, which apply once on commit
"""

import importlib
import sys
from pathlib import Path

from preferencer.gen import PreferenceGenerator, render_module
from preferencer.loader import load_model
from preferencer.runtime import MemoryContext

HERE = Path(__file__).parent


def main():
    # Generate the accessor module next to the declaring class
    classes = load_model(HERE / "user_settings.toml")
    report = PreferenceGenerator().generate_all(classes)
    if not report.ok:
        for diagnostic in report.errors:
            print(diagnostic)
        return 1

    (HERE / "user_settings_impl.py").write_text(render_module(report.types))
    sys.path.insert(0, str(HERE))
    UserSettingsImpl = importlib.import_module("user_settings_impl").UserSettingsImpl

    settings = UserSettingsImpl.get_instance(MemoryContext())
    print(f"Token before: {settings.get_token()}")

    # Direct write
    settings.set_age(42)

    # Transaction: both edits land together
    with settings.begin_transaction():
        settings.set_token("abc123")
        settings.use_dark_mode(True)

    print(f"Age: {settings.get_age()}")
    print(f"Token: {settings.get_token()}")
    print(f"Dark mode: {settings.is_dark_mode()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
