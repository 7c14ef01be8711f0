"""YAML message catalogues (``config/i18n/messages.<lang>.yaml``)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, List

import yaml

# snipdesk/core/i18n.py -> <project root>/config/i18n
CATALOGUE_DIR = Path(__file__).resolve().parents[2] / "config" / "i18n"
DEFAULT_LANG = "en"


def normalize_lang(lang: str | None) -> str:
    """Reduce a locale such as ``ru_RU.UTF-8`` to its language code."""
    code = (lang or "").strip().lower()
    for sep in (".", "_", "-"):
        code = code.split(sep, 1)[0]
    return code or DEFAULT_LANG


def _read_catalogue(path: Path) -> Dict[str, str]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items()}


class I18n:
    """Message lookup for one language, falling back to English.

    A key missing from both catalogues is returned as-is. ``{name}``
    placeholders are filled from keyword arguments.
    """

    def __init__(self, lang: str, base_dir: Path | None = None) -> None:
        self.lang = normalize_lang(lang)
        self.base_dir = base_dir or CATALOGUE_DIR
        self._fallback = _read_catalogue(self.base_dir / f"messages.{DEFAULT_LANG}.yaml")
        if self.lang == DEFAULT_LANG:
            self._messages = self._fallback
        else:
            self._messages = _read_catalogue(self.base_dir / f"messages.{self.lang}.yaml")

    def available(self) -> List[str]:
        return sorted(p.name.split(".")[1] for p in self.base_dir.glob("messages.*.yaml"))

    def t(self, key: str, **params: str) -> str:
        text = self._messages.get(key) or self._fallback.get(key) or key
        return text.format(**params) if params else text


@lru_cache
def get_i18n(lang: str) -> I18n:
    """Shared catalogue for ``lang`` from the bundled directory."""
    return I18n(lang)


__all__ = ["I18n", "get_i18n", "normalize_lang", "CATALOGUE_DIR"]
