"""semanticmd - convert HTML into token-efficient, semantic Markdown for LLMs.

Quick usage::

    from semanticmd import convert_to_markdown

    md = convert_to_markdown(html)

Main content, metadata frontmatter and URL references::

    from semanticmd import convert

    result = convert(
        html,
        extract_main_content=True,
        include_metadata="extended",
        refify_urls=True,
    )
    print(result.markdown)
    print(result.url_references)

Extension hooks::

    from semanticmd import Custom, convert_to_markdown

    def keep_iframes(element, options, depth):
        if element.name == "iframe":
            return [Custom(payload=element.get("src", ""))]
        return None

    md = convert_to_markdown(
        html,
        process_unhandled_element=keep_iframes,
        render_custom_node=lambda node, options, depth: f"[iframe]({node.payload})",
    )
"""

from semanticmd.convert import ConversionResult, convert, convert_to_markdown
from semanticmd.converter import SemanticConverter
from semanticmd.errors import ConversionError, InvalidConfiguration, ParseError
from semanticmd.fetch import FetchError, fetch_html
from semanticmd.nodes import Custom
from semanticmd.options import ConversionOptions, EscapeMode, MetaDataMode

__version__ = "0.1.0"
__all__ = [
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "Custom",
    "EscapeMode",
    "FetchError",
    "InvalidConfiguration",
    "MetaDataMode",
    "ParseError",
    "SemanticConverter",
    "convert",
    "convert_to_markdown",
    "fetch_html",
]
