"""osjs-cli configuration.

Process-wide settings, read once when the CLI starts and then passed down
explicitly.  The composer never looks at the environment itself: callers
hand it ``Settings.production``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from osjs_cli.composer import TOOL_ROOT


PRODUCTION_PATTERN = re.compile(r"^prod")


class Settings(BaseModel):
    """Global osjs-cli settings.

    Instances are typically created once by the CLI entry point (usually via
    :meth:`from_env`) and then passed through the rest of the system.
    """

    root: Path = Field(default=Path("."), description="Project root directory")
    node_env: str = Field(default="development", description="Value of NODE_ENV")
    packages_dir: str = Field(default="node_modules")
    output: Optional[Path] = Field(
        default=None, description="Where `config` writes the composed configuration"
    )
    tool_root: Path = Field(
        default=TOOL_ROOT,
        description="Directory whose node_modules holds the loaders osjs-cli ships with",
    )

    model_config = ConfigDict(frozen=True)

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def production(self) -> bool:
        """``True`` when ``node_env`` starts with ``prod``."""
        return bool(PRODUCTION_PATTERN.match(self.node_env))

    @property
    def packages_path(self) -> Path:
        """Directory scanned for installed packages."""
        return self.root / self.packages_dir

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: object) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            NODE_ENV, OSJS_ROOT, OSJS_TOOL_ROOT.

        Keyword arguments take precedence over the environment.
        """
        values: dict[str, object] = {
            "node_env": os.environ.get("NODE_ENV") or "development",
        }
        if os.environ.get("OSJS_ROOT"):
            values["root"] = Path(os.environ["OSJS_ROOT"])
        if os.environ.get("OSJS_TOOL_ROOT"):
            values["tool_root"] = Path(os.environ["OSJS_TOOL_ROOT"])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
