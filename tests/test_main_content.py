"""Tests for main content scoring and selection."""

from __future__ import annotations

from bs4 import BeautifulSoup

from semanticmd.extractors.main_content import (
    MIN_SCORE,
    calculate_score,
    find_main_content,
    link_density,
)

_LONG = "Lorem ipsum dolor sit amet, consectetur adipiscing elit sed do eiusmod. " * 2


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

class TestCalculateScore:
    def test_empty_div_scores_only_link_density(self):
        el = _soup("<div></div>").div
        assert calculate_score(el) == 5

    def test_distinct_names_are_cumulative(self):
        el = _soup('<div id="content" class="main article"></div>').div
        # 3 name matches + low link density
        assert calculate_score(el) == 35

    def test_same_name_on_id_and_class_counts_once(self):
        el = _soup('<div id="content" class="content"></div>').div
        assert calculate_score(el) == 15

    def test_partial_class_name_does_not_match(self):
        el = _soup('<div class="main-wrapper"></div>').div
        assert calculate_score(el) == 5

    def test_semantic_tag_bonus(self):
        el = _soup("<section></section>").section
        assert calculate_score(el) == 10

    def test_paragraph_bonus_capped(self):
        el = _soup("<div>" + "<p>x</p>" * 8 + "</div>").div
        assert calculate_score(el) == 5 + 5

    def test_text_length_bonus(self):
        el = _soup("<div>" + "a" * 450 + "</div>").div
        # 450 // 200 == 2
        assert calculate_score(el) == 2 + 5

    def test_text_length_bonus_capped(self):
        el = _soup("<div>" + "a" * 5000 + "</div>").div
        assert calculate_score(el) == 5 + 5

    def test_link_heavy_loses_density_bonus(self):
        el = _soup('<div><a href="/x">all link text</a></div>').div
        assert link_density(el) == 1.0
        assert calculate_score(el) == 0

    def test_data_attributes(self):
        el = _soup('<div data-main=""></div>').div
        assert calculate_score(el) == 15

    def test_role_main(self):
        el = _soup('<div role="main"></div>').div
        assert calculate_score(el) == 15

    def test_link_density_zero_for_empty(self):
        assert link_density(_soup("<div></div>").div) == 0.0


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class TestFindMainContent:
    def test_main_element_wins(self):
        soup = _soup('<body><article id="content"><p>x</p></article><main id="m">y</main></body>')
        assert find_main_content(soup)["id"] == "m"

    def test_role_main_second(self):
        soup = _soup('<body><div id="a">x</div><div id="b" role="main">y</div></body>')
        assert find_main_content(soup)["id"] == "b"

    def test_article_selected_over_nav(self):
        paragraphs = "".join(f"<p>{_LONG}</p>" for _ in range(3))
        soup = _soup(
            '<body><nav><a href="/a">A</a><a href="/b">B</a></nav>'
            f'<article id="main-content">{paragraphs}</article></body>',
        )
        article = soup.find("article")
        assert calculate_score(article) >= MIN_SCORE
        assert find_main_content(soup) is article

    def test_fixture_article(self, article_html):
        result = find_main_content(_soup(article_html))
        assert result.name == "article"
        assert result["id"] == "main-content"

    def test_falls_back_to_body(self, listing_html):
        soup = _soup(listing_html)
        assert find_main_content(soup) is soup.body

    def test_nested_inner_candidate_wins_when_outer_below_threshold(self):
        # outer: 10 (id) + 2 (p) + 1 (text) + 5 (density) = 18
        # inner: 10 (class) + 5 (tag) + 2 + 1 + 5 = 23
        soup = _soup(
            '<body><div id="content"><article class="main-content">'
            f"<p>{_LONG}</p><p>{_LONG}</p></article></div></body>",
        )
        assert find_main_content(soup).name == "article"

    def test_nested_outer_candidate_wins_with_higher_score(self):
        # outer: 20 (id + class) + 2 + 1 + 5 = 28 beats the inner 23; a
        # higher-scoring ancestor is not filtered out in favour of its child.
        soup = _soup(
            '<body><div id="content" class="main"><article class="main-content">'
            f"<p>{_LONG}</p><p>{_LONG}</p></article></div></body>",
        )
        result = find_main_content(soup)
        assert result.name == "div"
        assert result["id"] == "content"

    def test_flat_candidates_tie_goes_to_first(self):
        soup = _soup(
            '<body><div id="first" class="content main">x</div>'
            '<div id="second" class="content main">x</div></body>',
        )
        assert find_main_content(soup)["id"] == "first"

    def test_document_without_body(self):
        soup = BeautifulSoup('<div class="content main">text</div>', "html.parser")
        assert find_main_content(soup).name == "div"
