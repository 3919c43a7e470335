"""Tests for HTML -> AST parsing."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from semanticmd.extractors.ast_builder import generate_column_id, html_to_ast
from semanticmd.nodes import (
    Blockquote,
    Bold,
    Code,
    Custom,
    Heading,
    Image,
    Italic,
    Link,
    List,
    ListItem,
    SemanticHTML,
    Strikethrough,
    Table,
    Text,
    Video,
)
from semanticmd.options import ConversionOptions


def _parse(html: str, **options) -> list:
    body = BeautifulSoup(html, "lxml").body
    return html_to_ast(body, ConversionOptions(**options))


# ---------------------------------------------------------------------------
# Column IDs
# ---------------------------------------------------------------------------

class TestGenerateColumnId:
    @pytest.mark.parametrize(
        ("index", "expected"),
        [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (701, "ZZ"), (702, "AAA")],
    )
    def test_labels(self, index, expected):
        assert generate_column_id(index) == expected


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestElementDispatch:
    def test_text_trimmed_and_whitespace_dropped(self):
        assert _parse("<div>  hello  \n <span> </span></div>") == [Text("hello")]

    def test_headings(self):
        nodes = _parse("<h1>One</h1><h6>Six</h6>")
        assert nodes == [Heading(1, [Text("One")]), Heading(6, [Text("Six")])]

    def test_paragraph_is_transparent(self):
        assert _parse("<p>a <b>b</b></p>") == [Text("a"), Bold([Text("b")])]

    def test_inline_formatting(self):
        nodes = _parse("<strong>s</strong><em>e</em><i>i</i><del>d</del><strike>k</strike>")
        assert nodes == [
            Bold([Text("s")]),
            Italic([Text("e")]),
            Italic([Text("i")]),
            Strikethrough([Text("d")]),
            Strikethrough([Text("k")]),
        ]

    def test_link_and_image(self):
        nodes = _parse('<a href="/x">go</a><img src="a.png" alt="A">')
        assert nodes == [Link("/x", [Text("go")]), Image("a.png", "A")]

    def test_video(self):
        nodes = _parse('<video src="v.mp4" poster="p.jpg" controls></video><video src="w.mp4"></video>')
        assert nodes == [Video("v.mp4", "p.jpg", True), Video("w.mp4", "", False)]

    def test_lists_only_direct_items(self):
        nodes = _parse("<ul><li>a</li><li>b <ol><li>c</li></ol></li></ul>")
        assert nodes == [
            List(False, [
                ListItem([Text("a")]),
                ListItem([Text("b"), List(True, [ListItem([Text("c")])])]),
            ]),
        ]

    def test_inline_code(self):
        assert _parse("<p>use <code>x = 1</code></p>") == [Text("use"), Code("x = 1", inline=True)]

    def test_pre_with_code_language(self):
        nodes = _parse('<pre><code class="hljs language-go">fmt.Println()</code></pre>')
        assert nodes == [Code("fmt.Println()", language="go")]

    def test_pre_lang_prefix(self):
        assert _parse('<pre><code class="lang-sh">ls</code></pre>') == [Code("ls", language="sh")]

    def test_pre_without_code(self):
        assert _parse("<pre>raw  text</pre>") == [Code("raw  text")]

    def test_blockquote(self):
        assert _parse("<blockquote><p>q</p></blockquote>") == [Blockquote([Text("q")])]

    def test_br(self):
        assert _parse("a<br>b") == [Text("a"), Text("\n"), Text("b")]

    def test_semantic_elements(self):
        nodes = _parse("<section><h2>S</h2></section><aside>x</aside>")
        assert nodes == [
            SemanticHTML("section", [Heading(2, [Text("S")])]),
            SemanticHTML("aside", [Text("x")]),
        ]

    def test_dropped_elements(self):
        assert _parse("<div><script>x()</script><style>a{}</style><noscript>n</noscript>ok</div>") == [Text("ok")]

    def test_comments_ignored(self):
        assert _parse("<div><!-- hidden -->shown</div>") == [Text("shown")]

    def test_unknown_tag_recurses(self):
        assert _parse("<custom-el><b>x</b></custom-el>") == [Bold([Text("x")])]

    def test_uppercase_tags(self):
        soup = BeautifulSoup("<H2>Up</H2>", "html.parser")
        assert html_to_ast(soup) == [Heading(2, [Text("Up")])]


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

class TestTables:
    def test_header_detection(self, tables_html):
        (table,) = _parse(tables_html)
        assert isinstance(table, Table)
        assert table.has_header
        assert len(table.rows) == 3
        assert table.rows[2].cells[0].colspan == 2

    def test_no_header_when_mixed(self):
        (table,) = _parse("<table><tr><th>a</th><td>b</td></tr></table>")
        assert not table.has_header

    def test_no_header_without_th(self):
        (table,) = _parse("<table><tr><td>a</td></tr></table>")
        assert not table.has_header
        assert table.rows[0].cells[0].is_header is False

    @pytest.mark.parametrize("value", ["0", "-2", "abc", "", "2.5"])
    def test_invalid_spans_default_to_one(self, value):
        (table,) = _parse(f'<table><tr><td colspan="{value}" rowspan="{value}">a</td></tr></table>')
        cell = table.rows[0].cells[0]
        assert (cell.colspan, cell.rowspan) == (1, 1)

    def test_column_tracking(self):
        (table,) = _parse(
            "<table><tr><th>a</th><th>b</th></tr><tr><td>c</td><td>d</td><td>e</td></tr></table>",
            enable_table_column_tracking=True,
        )
        assert table.col_ids == ["A", "B"]
        assert [c.col_id for c in table.rows[1].cells] == ["A", "B", "C"]

    def test_no_column_ids_by_default(self):
        (table,) = _parse("<table><tr><td>a</td></tr></table>")
        assert table.col_ids == []
        assert table.rows[0].cells[0].col_id == ""


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------

class TestHooks:
    def test_override_replaces_builtin(self):
        def override(el, options, depth):
            if getattr(el, "name", None) == "h1":
                return [Text("replaced")]
            return None

        nodes = _parse("<h1>x</h1><h2>y</h2>", override_element_processing=override)
        assert nodes == [Text("replaced"), Heading(2, [Text("y")])]

    def test_override_sees_text_nodes(self):
        seen = []

        def override(el, options, depth):
            seen.append(str(el) if el.name is None else el.name)
            return None

        _parse("<p>hi</p>", override_element_processing=override)
        assert seen == ["p", "hi"]

    def test_override_empty_list_drops_element(self):
        nodes = _parse("<h1>x</h1>", override_element_processing=lambda el, o, d: [])
        assert nodes == []

    def test_unhandled_hook_only_for_unknown_tags(self):
        calls = []

        def unhandled(el, options, depth):
            calls.append(el.name)
            return [Custom(payload=el.get("src"))]

        nodes = _parse('<div><iframe src="/e"></iframe></div><div>x</div>', process_unhandled_element=unhandled)
        assert calls == ["iframe"]
        assert nodes == [Custom(payload="/e"), Text("x")]

    def test_unhandled_hook_none_falls_back(self):
        nodes = _parse("<font>x</font>", process_unhandled_element=lambda el, o, d: None)
        assert nodes == [Text("x")]

    def test_depth_increases_in_list_items(self):
        depths = {}

        def override(el, options, depth):
            if getattr(el, "name", None) == "b":
                depths[el.get_text()] = depth
            return None

        _parse("<b>top</b><ul><li><b>item</b></li></ul>", override_element_processing=override)
        assert depths == {"top": 0, "item": 1}


