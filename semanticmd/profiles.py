"""YAML-based option profiles.

A profile holds default conversion options plus per-domain overrides::

    default:
      extract_main_content: true
      include_metadata: basic
    domains:
      example.com:
        refify_urls: true
      docs.example.com:
        enable_table_column_tracking: true

The most specific matching domain (exact host or parent domain) wins. The
lookup key may be a full URL or a bare host name.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

from semanticmd.errors import InvalidConfiguration


def _host(url: str) -> str:
    """Lower-cased host of *url*; bare domains such as ``example.com`` are accepted."""
    if not url:
        return ""
    host = urlparse(url).netloc or url.split("/")[0]
    return host.lower().split(":")[0]


def load_profile(path: str | Path, url: str = "") -> dict[str, Any]:
    """Load YAML profile and return merged option values for the given URL."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise InvalidConfiguration(f"cannot read profile {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"invalid profile {path}: {exc}") from exc
    default = data.get("default", {}) if isinstance(data, dict) else {}
    domains = data.get("domains", {}) if isinstance(data, dict) else {}

    netloc = _host(url)
    best_key = ""
    best_cfg: dict[str, Any] = {}
    if netloc and isinstance(domains, dict):
        for key, cfg in domains.items():
            if not isinstance(key, str) or not isinstance(cfg, dict):
                continue
            key_lower = key.lower()
            if (netloc == key_lower or netloc.endswith("." + key_lower)) and (
                len(key_lower) > len(best_key)
            ):
                best_key = key_lower
                best_cfg = cfg

    merged: dict[str, Any] = {}
    if isinstance(default, dict):
        merged.update(default)
    merged.update(best_cfg)
    return merged
