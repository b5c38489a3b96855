"""osjs-cli command-line entry point.

Tasks:

config            -- Compose the bundler configuration for a project.
make:auth         -- Scaffold an authentication adapter.
make:settings     -- Scaffold a settings adapter.
make:provider     -- Scaffold a service provider.
make:vfs          -- Scaffold a VFS adapter.
make:application  -- Scaffold an application package.
create:package    -- Deprecated alias for make:application.

Usage::

    python -m osjs_cli.cli config . --overrides build.yml --output webpack.json
    NODE_ENV=production osjs-cli config ./src/packages/MyApp
    osjs-cli --root ./my-project make:application
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from osjs_cli.composer import PathResolutionError, bundler, compose
from osjs_cli.config import Settings
from osjs_cli.scaffolder import (
    SCAFFOLDS,
    ScaffoldError,
    ask_basic,
    ask_package,
    discover_packages,
    scaffold_basic,
    scaffold_package,
)
from osjs_cli.utils import (
    console,
    load_structured,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_task_header,
    print_warning,
    save_json,
)


BASIC_TASKS: dict[str, str] = {
    "make:auth": "auth",
    "make:settings": "settings",
    "make:provider": "providers",
    "make:vfs": "vfs",
}


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


async def run_config(settings: Settings, directory: Path, overrides_file: Optional[Path]) -> int:
    """Compose the configuration for *directory* and print or write it."""
    overrides: dict[str, Any] = {}
    if overrides_file is not None:
        overrides = load_structured(overrides_file)

    config = compose(
        directory, overrides, production=settings.production, tool_root=settings.tool_root
    )
    payload = config.to_webpack()

    if settings.output is None:
        console.print_json(data=payload)
        return 0

    print_task_header("config")
    await save_json(payload, settings.output)
    print_summary_table(
        {
            "Mode": config.mode.value,
            "Context": str(config.context),
            "Output": str(config.output.path),
            "Rules": str(len(config.module.rules)),
            "Plugins": str(len(config.plugins)),
        },
        title="Bundler configuration",
    )
    print_success(f"Wrote {settings.output}")
    console.print(f"Run: {' '.join(bundler.command(settings.output))}")
    return 0


async def run_basic(settings: Settings, kind: str) -> int:
    scaffold = SCAFFOLDS[kind]
    print_info(f"Scaffolding {kind}")
    answers = ask_basic(kind, scaffold)
    written = await scaffold_basic(kind, answers, settings.root)
    if written is not None:
        console.print(scaffold.info)
    return 0


async def run_application(settings: Settings) -> int:
    packages = discover_packages(settings.packages_path)
    answers = ask_package(packages)
    await scaffold_package(answers, settings.root, packages)
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="osjs-cli",
        description="osjs-cli -- bundler configuration and scaffolding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  osjs-cli config .\n"
            "  osjs-cli config src/packages/MyApp --overrides build.yml -o webpack.json\n"
            "  osjs-cli make:application\n"
        ),
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root (default: $OSJS_ROOT or the current directory)",
    )
    subparsers = parser.add_subparsers(dest="task", required=True)

    config_parser = subparsers.add_parser("config", help="Compose the bundler configuration")
    config_parser.add_argument(
        "directory", nargs="?", default=None, help="Build root (default: the project root)"
    )
    config_parser.add_argument(
        "--overrides", default=None, help="JSON or YAML file with option overrides"
    )
    config_parser.add_argument(
        "--production",
        action="store_true",
        help="Force a production build (default: derived from NODE_ENV)",
    )
    config_parser.add_argument(
        "--output", "-o", default=None, help="Write the configuration to this file"
    )

    for task, kind in BASIC_TASKS.items():
        subparsers.add_parser(task, help=f"Scaffold a {SCAFFOLDS[kind].title}")
    subparsers.add_parser("make:application", help="Scaffold an application package")
    subparsers.add_parser("create:package", help="Deprecated: use make:application")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for ``osjs-cli`` / ``python -m osjs_cli.cli``."""
    args = build_parser().parse_args(argv)

    settings_kwargs: dict[str, Any] = {"root": Path(args.root) if args.root else None}
    if args.task == "config":
        if args.production:
            settings_kwargs["node_env"] = "production"
        settings_kwargs["output"] = Path(args.output) if args.output else None
    settings = Settings.from_env(**settings_kwargs)

    try:
        if args.task == "config":
            directory = Path(args.directory) if args.directory else settings.root
            overrides_file = Path(args.overrides) if args.overrides else None
            return asyncio.run(run_config(settings, directory, overrides_file))
        if args.task in BASIC_TASKS:
            print_task_header(args.task)
            return asyncio.run(run_basic(settings, BASIC_TASKS[args.task]))
        if args.task == "create:package":
            print_warning(
                "The task 'create:package' is deprecated, please use 'make:*' tasks instead"
            )
        print_task_header("make:application")
        return asyncio.run(run_application(settings))
    except PathResolutionError as exc:
        print_error(f"Error: {exc}")
    except ValidationError as exc:
        print_error(f"Error: invalid build options\n{exc}")
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
    except (OSError, ValueError) as exc:
        print_error(f"Error: {exc}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
