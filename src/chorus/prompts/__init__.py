"""Prompt templates.

Every instruction sent to a model lives in a ``.txt`` file next to this module.
A file with the same name under ``./prompts/`` in the working directory takes
precedence, so prompts can be tuned without touching the package.
Templates use ``str.format`` fields; literal braces are doubled.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

_PACKAGE_DIR = Path(__file__).parent


def _search_dirs() -> list[Path]:
    return [Path.cwd() / "prompts", _PACKAGE_DIR]


@lru_cache(maxsize=32)
def load_prompt(name: str) -> str:
    """Return the raw template called ``name``.

    Raises:
        FileNotFoundError: If no directory has ``{name}.txt``
    """
    candidates = [directory / f"{name}.txt" for directory in _search_dirs()]
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8")

    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def render_prompt(name: str, **fields: Any) -> str:
    """Fill a template's fields and strip surrounding whitespace.

    Raises:
        ValueError: If the template uses a field that was not supplied
    """
    try:
        return load_prompt(name).format(**fields).strip()
    except KeyError as e:
        raise ValueError(f"Prompt '{name}' needs field {e.args[0]!r}") from e


def available_prompts() -> list[str]:
    """Names of the packaged templates."""
    return sorted(path.stem for path in _PACKAGE_DIR.glob("*.txt"))


def clear_cache() -> None:
    """Forget loaded templates (after editing an override file)."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "render_prompt",
    "available_prompts",
    "clear_cache",
]
