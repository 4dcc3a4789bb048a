"""Configuration management for CSS Modules Doctor.

Reads environment variables and a project .env, and resolves the options of a
single run without modifying the process environment.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional
from dotenv import dotenv_values

__version__ = "1.2.0"

DEFAULT_STYLE_GLOBS = ['.css']
DEFAULT_EXTS = ['jsx', 'tsx']

TRUTHY_VALUES = {'1', 'true', 'yes', 'on'}


def split_values(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated and comma-separated option values.

    ``['jsx,tsx', ' js ']`` becomes ``['jsx', 'tsx', 'js']``.
    """
    if not values:
        return []

    if isinstance(values, str):
        values = [values]

    result = []
    for value in values:
        for part in value.split(','):
            part = part.strip()
            if part:
                result.append(part)
    return result


@dataclass
class Config:
    """Options for one analysis run."""

    # Paths to ignore. Can be directories or specific CSS files.
    ignore: List[str] = field(default_factory=list)
    # Suffixes identifying CSS module imports, e.g. '.module.css'
    style_globs: List[str] = field(default_factory=lambda: list(DEFAULT_STYLE_GLOBS))
    # Component file extensions, with or without leading dot
    exts: List[str] = field(default_factory=lambda: list(DEFAULT_EXTS))
    # Also report selectors used in components but missing from CSS
    reverse: bool = False
    output: Optional[str] = None
    output_format: Optional[str] = None

    @classmethod
    def load(
        cls,
        project_root: str | Path,
        ignore: Optional[Iterable[str]] = None,
        style_globs: Optional[Iterable[str]] = None,
        exts: Optional[Iterable[str]] = None,
        reverse: Optional[bool] = None,
        output: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> 'Config':
        """Build a Config from explicit values, environment and defaults.

        Priority:
        1. Explicit argument (anything other than None / empty)
        2. CSSMDOC_* environment variable, then the same key in project_root/.env
        3. Built-in default

        Args:
            project_root: Root of the analyzed project, used to locate .env

        Returns:
            Resolved Config instance
        """
        env = {
            key: value
            for key, value in dotenv_values(Path(project_root) / '.env').items()
            if value is not None
        }
        # Real environment variables override the project's .env
        env.update(os.environ)

        return cls(
            ignore=split_values(ignore) or split_values(env.get('CSSMDOC_IGNORE')),
            style_globs=(
                split_values(style_globs)
                or split_values(env.get('CSSMDOC_STYLE_GLOBS'))
                or list(DEFAULT_STYLE_GLOBS)
            ),
            exts=(
                split_values(exts)
                or split_values(env.get('CSSMDOC_EXTS'))
                or list(DEFAULT_EXTS)
            ),
            reverse=reverse if reverse else _env_flag(env, 'CSSMDOC_REVERSE'),
            output=output or env.get('CSSMDOC_OUTPUT') or None,
            output_format=output_format or env.get('CSSMDOC_OUTPUT_FORMAT') or None,
        )


def _env_flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, '').strip().lower() in TRUTHY_VALUES
