"""Command-line interface for preferencer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from argparse import Namespace

    from preferencer.config import PreferencerConfig

logger = logging.getLogger(__name__)


def get_version() -> str:
    """Get the preferencer version."""
    from preferencer import __version__

    return __version__


def _load_config(args: Namespace, near: Path) -> PreferencerConfig:
    from preferencer.config import PreferencerConfig, find_config, load_config

    config_path = Path(args.config) if args.config else find_config(near)
    config = load_config(config_path) if config_path else PreferencerConfig()
    if getattr(args, "naming", None):
        config.naming = args.naming
    return config


def cmd_generate(args: Namespace) -> int:
    """Generate accessor classes and print them as one module."""
    from preferencer.errors import PreferencerError
    from preferencer.gen import PreferenceGenerator, render_module
    from preferencer.loader import load_model

    model_path = Path(args.model)
    try:
        config = _load_config(args, model_path.parent)
        classes = load_model(model_path, config)
    except (FileNotFoundError, PreferencerError) as e:
        logger.error("%s", e)
        return 1

    if args.class_name:
        classes = [c for c in classes if c.name == args.class_name]
        if not classes:
            logger.error("No class named %s in %s", args.class_name, model_path)
            return 1

    report = PreferenceGenerator(config=config).generate_all(classes)
    if report.types:
        print(render_module(report.types, header=config.header), end="")

    if not report.ok:
        logger.error("%d of %d classes failed", len(report.errors), len(classes))
        return 1
    return 0


def cmd_types(args: Namespace) -> int:
    """List the value types preferences may use."""
    from preferencer.errors import PreferencerError

    try:
        config = _load_config(args, Path.cwd())
    except PreferencerError as e:
        logger.error("%s", e)
        return 1

    resolver = config.build_resolver()
    for value_type in resolver.supported_types():
        method = resolver.resolve(value_type)
        print(f"{value_type}: {method.get}/{method.put} (default {method.default_value})")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    from preferencer.naming import NAMING_STYLES

    parser = argparse.ArgumentParser(
        prog="preferencer",
        description="Generate typed preference accessor classes",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate accessor classes")
    generate_parser.add_argument("model", help="TOML file describing preference classes")
    generate_parser.add_argument(
        "--config",
        "-c",
        help="Config file (default: nearest preferencer.toml)",
    )
    generate_parser.add_argument(
        "--naming",
        choices=sorted(NAMING_STYLES),
        help="Naming style for setters and removers",
    )
    generate_parser.add_argument(
        "--class",
        dest="class_name",
        help="Only generate the class with this name",
    )
    generate_parser.set_defaults(func=cmd_generate)

    # types command
    types_parser = subparsers.add_parser("types", help="List supported value types")
    types_parser.add_argument(
        "--config",
        "-c",
        help="Config file (default: nearest preferencer.toml)",
    )
    types_parser.set_defaults(func=cmd_types)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
