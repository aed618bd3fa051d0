"""
Runtime settings for drivetext.

Read from DRIVETEXT_* environment variables, overridable per call.
OAuth parameters are not here — see oauth_config.py.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

# Drive files.list rejects pageSize above this
MAX_PAGE_SIZE = 1000

DEFAULT_OUTPUT_DIR = Path("saved-outputs")


@dataclass(frozen=True)
class Settings:
    """Everything a run needs besides credentials."""
    output_dir: Path = DEFAULT_OUTPUT_DIR
    max_concurrency: int = 4
    page_size: int = 100
    max_pages: int | None = None
    folder_id: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {self.max_pages}")


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(**overrides: Any) -> Settings:
    """
    Build Settings from the environment, then apply overrides.

    Overrides set to None are ignored, so argparse namespaces can be passed
    through without filtering.

    Raises:
        ValueError: On non-integer or out-of-range values
    """
    env: dict[str, Any] = {}

    output_dir = os.environ.get("DRIVETEXT_OUTPUT_DIR")
    if output_dir:
        env["output_dir"] = Path(output_dir)

    for key, name in (
        ("max_concurrency", "DRIVETEXT_MAX_CONCURRENCY"),
        ("page_size", "DRIVETEXT_PAGE_SIZE"),
        ("max_pages", "DRIVETEXT_MAX_PAGES"),
    ):
        value = _env_int(name)
        if value is not None:
            env[key] = value

    folder_id = os.environ.get("DRIVETEXT_FOLDER_ID")
    if folder_id:
        env["folder_id"] = folder_id

    log_level = os.environ.get("DRIVETEXT_LOG_LEVEL")
    if log_level:
        env["log_level"] = log_level

    known = {f.name for f in fields(Settings)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

    settings = Settings(**env)
    explicit = {k: v for k, v in overrides.items() if v is not None}
    if "output_dir" in explicit:
        explicit["output_dir"] = Path(explicit["output_dir"])
    return replace(settings, **explicit)
