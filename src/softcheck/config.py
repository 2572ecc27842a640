"""Configuration loaded from the ``[tool.softcheck]`` table of pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"


class SoftcheckConfig(BaseModel):
    """Settings for soft assertion engines and the pytest plugin.

    Attributes:
    ----------
    clear_known_failures_on_flush: bool
        Clear the process-wide known-failure registry on every flush
    report_indent: int
        Indentation of the JSON report raised on flush
    log_pass_messages: bool
        Log pass messages of successful checks at INFO
    known_failures: list[str]
        Labels registered before every test run by the pytest plugin
    report_path: str | None
        File the pytest plugin writes flush reports to
    """

    model_config = ConfigDict(extra="forbid")

    clear_known_failures_on_flush: bool = True
    report_indent: int = Field(default=2, ge=0)
    log_pass_messages: bool = True
    known_failures: list[str] = Field(default_factory=list)
    report_path: str | None = None


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` to the nearest pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / PYPROJECT
        if candidate.is_file():
            return candidate
    return None


def _read_table(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    return data.get("tool", {}).get("softcheck", {})


def load_config(start: Path | None = None) -> SoftcheckConfig:
    """Load settings from the nearest pyproject.toml, or defaults if there is none.

    Raises:
    ------
    ValueError
        If the table contains unknown keys or invalid values.
    """
    path = find_pyproject(start)
    if path is None:
        return SoftcheckConfig()

    table = _read_table(path)
    try:
        config = SoftcheckConfig.model_validate(table)
    except ValidationError as exc:
        msg = f"Invalid [tool.softcheck] settings in {path}: {exc}"
        raise ValueError(msg) from exc

    logger.debug("Loaded softcheck config from %s", path)
    return config
