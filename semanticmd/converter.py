"""semanticmd.converter: Reusable converter object.

Bundles a validated set of default options so repeated conversions don't
re-specify them.

Usage::

    from semanticmd import SemanticConverter

    converter = SemanticConverter(extract_main_content=True,
                                  include_metadata="extended")
    md = converter.to_markdown(html)

    # Per-call overrides
    result = converter.convert(html, refify_urls=True)
    print(result.url_references)

    # Fetch and convert in one step
    result = converter.convert_url("https://example.com/blog/post")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from semanticmd.convert import ConversionResult, convert, resolve_options
from semanticmd.fetch import fetch_html

if TYPE_CHECKING:
    from bs4 import Tag

    from semanticmd.options import ConversionOptions


class SemanticConverter:
    """HTML to Markdown converter with fixed default options.

    Args:
        options:   Base :class:`~semanticmd.options.ConversionOptions` or a
                   mapping of option names.
        timeout:   Network timeout in seconds for :meth:`convert_url`.
        **defaults: Individual option values applied on top of *options*.

    Raises:
        :class:`~semanticmd.errors.InvalidConfiguration`: when the defaults
            do not validate.
    """

    def __init__(
        self,
        options: ConversionOptions | Mapping[str, Any] | None = None,
        *,
        timeout: int = 30,
        **defaults: Any,
    ) -> None:
        self.options = resolve_options(options, **defaults)
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    def convert(self, markup: str | bytes | Tag, **overrides: Any) -> ConversionResult:
        return convert(markup, self.options, **overrides)

    def to_markdown(self, markup: str | bytes | Tag, **overrides: Any) -> str:
        return self.convert(markup, **overrides).markdown

    def convert_url(self, url: str, **overrides: Any) -> ConversionResult:
        """Fetch *url* and convert it.

        Raises:
            :class:`~semanticmd.fetch.FetchError`: when the page can't be fetched.
        """
        html = fetch_html(url, timeout=self._timeout)
        overrides.setdefault("website_domain", self.options.website_domain or url)
        return self.convert(html, **overrides)

    def __repr__(self) -> str:
        return f"SemanticConverter({self.options!r})"
