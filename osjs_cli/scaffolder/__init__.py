"""osjs-cli scaffolder -- writes adapter and application skeletons.

Quick usage::

    from osjs_cli.scaffolder import PackageAnswers, scaffold_package

    answers = PackageAnswers(name="MyApp", target="src/packages/MyApp", confirm=True)
    written = await scaffold_package(answers, "/path/to/project")
"""

from osjs_cli.scaffolder.generator import (
    SCAFFOLDS,
    BasicAnswers,
    DestinationExistsError,
    InvalidNameError,
    PackageAnswers,
    PackageInfo,
    Scaffold,
    ScaffoldError,
    discover_packages,
    filter_input,
    scaffold_basic,
    scaffold_package,
    validate_package_name,
)
from osjs_cli.scaffolder.prompts import ask_basic, ask_package
from osjs_cli.scaffolder.templates import MARKER, TemplateRenderer

__all__ = [
    "MARKER",
    "SCAFFOLDS",
    "BasicAnswers",
    "DestinationExistsError",
    "InvalidNameError",
    "PackageAnswers",
    "PackageInfo",
    "Scaffold",
    "ScaffoldError",
    "TemplateRenderer",
    "ask_basic",
    "ask_package",
    "discover_packages",
    "filter_input",
    "scaffold_basic",
    "scaffold_package",
    "validate_package_name",
]
