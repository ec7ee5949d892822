# -*- coding: utf-8 -*-
"""
Configuration from the environment and the resource locator for form assets
(template bitmap and font). Paths are injected into renderers, never discovered
from the install layout at render time.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ASSETS_DIR = Path(__file__).resolve().parent / "assets"
DEFAULT_TEMPLATE = ASSETS_DIR / "upn_sl.png"
DEFAULT_FONT = ASSETS_DIR / "courbd.ttf"


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


@dataclass
class ResourceLocator:
    """Where the form template and the Courier Bold font live."""
    template_path: Path
    font_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ResourceLocator":
        template = _env("UPN_TEMPLATE_PATH") or str(DEFAULT_TEMPLATE)
        font = _env("UPN_FONT_PATH") or str(DEFAULT_FONT)
        return cls(template_path=Path(template), font_path=Path(font))

    def with_overrides(self, template_path=None, font_path=None) -> "ResourceLocator":
        return ResourceLocator(
            template_path=Path(template_path) if template_path else self.template_path,
            font_path=Path(font_path) if font_path else self.font_path,
        )


def get_config() -> dict:
    log_level = _env("UPN_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown UPN_LOG_LEVEL: {log_level}")
    return {
        "qr_size": int(_env("UPN_QR_SIZE", "250")),
        "locator": ResourceLocator.from_env(),
        "log_level": log_level,
    }
