from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_CSS_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class CriticalCSSBundle:
    """Inline first-paint CSS plus the styles injected once the page is idle."""

    critical: str
    deferred: str


@lru_cache(maxsize=1)
def load_bundle(css_dir: Path = _CSS_DIR) -> CriticalCSSBundle:
    """Read the bundle from disk once per process."""
    return CriticalCSSBundle(
        critical=(css_dir / "critical.css").read_text(encoding="utf-8").strip(),
        deferred=(css_dir / "non-critical.css").read_text(encoding="utf-8").strip(),
    )
