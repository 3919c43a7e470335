"""Pipeline stages: content selection, metadata, AST building, refification, rendering."""

from .ast_builder import generate_column_id, html_to_ast
from .frontmatter import render_frontmatter
from .main_content import MIN_SCORE, calculate_score, find_main_content
from .markdown import render_markdown
from .metadata import MalformedJSONLD, extract_metadata
from .refify import MEDIA_SUFFIXES, refify_urls

__all__ = [
    "MEDIA_SUFFIXES",
    "MIN_SCORE",
    "MalformedJSONLD",
    "calculate_score",
    "extract_metadata",
    "find_main_content",
    "generate_column_id",
    "html_to_ast",
    "refify_urls",
    "render_frontmatter",
    "render_markdown",
]
