"""YAML frontmatter for document metadata and URL references."""

from __future__ import annotations

from typing import Any

import yaml

from semanticmd.nodes import MetaData
from semanticmd.options import ConversionOptions, MetaDataMode

_UNKNOWN_TYPE = "(unknown type)"
_SCHEMA_SKIP_KEYS: frozenset[str] = frozenset({"@context", "@type"})


def _yaml_entry(key: str, value: Any, indent: int) -> str:
    """Dump ``{key: value}`` as block YAML, indented by *indent* spaces.

    The key is written as-is (``@id``, not ``'@id'``); only the value goes
    through YAML quoting.
    """
    dumped = yaml.safe_dump(
        {"_": value},
        allow_unicode=True,
        sort_keys=True,
        default_flow_style=False,
        width=float("inf"),
    )
    lines = dumped.splitlines()
    lines[0] = str(key) + lines[0][1:]
    pad = " " * indent
    return "".join(pad + line + "\n" for line in lines)


def _write_sorted(lines: list[str], mapping: dict[str, Any], indent: int) -> None:
    for key in sorted(mapping):
        lines.append(_yaml_entry(key, mapping[key], indent))


def render_frontmatter(
    meta: MetaData,
    options: ConversionOptions,
    url_references: dict[str, str] | None = None,
) -> str:
    """Return the ``---`` delimited block, or ``""`` when metadata is off."""
    if not options.metadata_enabled:
        return ""

    lines: list[str] = ["---\n"]
    _write_sorted(lines, meta.standard, 0)

    if options.include_metadata is MetaDataMode.EXTENDED:
        if meta.open_graph:
            lines.append("openGraph:\n")
            _write_sorted(lines, meta.open_graph, 2)
        if meta.twitter:
            lines.append("twitter:\n")
            _write_sorted(lines, meta.twitter, 2)
        if meta.jsonld:
            lines.append("schema:\n")
            for item in meta.jsonld:
                item_type = item.get("@type")
                if not isinstance(item_type, str) or not item_type:
                    item_type = _UNKNOWN_TYPE
                lines.append(f"  {item_type}:\n")
                _write_sorted(
                    lines,
                    {k: v for k, v in item.items() if k not in _SCHEMA_SKIP_KEYS},
                    4,
                )

    if options.refify_urls and url_references:
        lines.append("urlReferences:\n")
        _write_sorted(lines, url_references, 2)

    lines.append("---\n\n")
    return "".join(lines)
