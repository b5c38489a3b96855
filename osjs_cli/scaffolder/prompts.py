"""Interactive prompts for the scaffolding tasks.

Thin wrappers around ``rich.prompt`` that turn terminal input into the
answer models consumed by :mod:`osjs_cli.scaffolder.generator`.
"""

from __future__ import annotations

from rich.prompt import Confirm, Prompt

from osjs_cli.utils import console, print_error

from .generator import (
    BasicAnswers,
    InvalidNameError,
    PackageAnswers,
    PackageInfo,
    Scaffold,
    filter_input,
    validate_package_name,
)


TYPE_CHOICES = ["client", "server"]


def ask_basic(kind: str, scaffold: Scaffold) -> BasicAnswers:
    """Ask for type, filename and destination of an adapter scaffold."""
    type_ = Prompt.ask(
        f"Select {scaffold.title} type (client = ES6+, server = nodejs)",
        choices=TYPE_CHOICES,
        default="client",
        console=console,
    )
    filename = Prompt.ask(
        "Name of file", default=f"my-{scaffold.dirname}.js", console=console
    )
    target = Prompt.ask(
        "Destination", default=f"src/{type_}/{kind}/{filename}", console=console
    )
    confirm = Confirm.ask(
        f"Are you sure you want to write to '{target}'", console=console
    )
    return BasicAnswers(type=type_, filename=filename, target=target, confirm=confirm)


def ask_package(packages: list[PackageInfo]) -> PackageAnswers:
    """Ask for the package name (re-asking until valid) and destination."""
    while True:
        name = filter_input(
            Prompt.ask(
                "Enter name of package ([A-Za-z0-9_])",
                default="MyApplication",
                console=console,
            )
        )
        try:
            validate_package_name(name, packages)
        except InvalidNameError as exc:
            print_error(str(exc))
            continue
        break

    target = Prompt.ask("Destination", default=f"src/packages/{name}", console=console)
    confirm = Confirm.ask(
        f"Are you sure you want to write to '{target}'", console=console
    )
    return PackageAnswers(name=name, target=target, confirm=confirm)
