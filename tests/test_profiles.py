"""Tests for YAML option profiles."""

from __future__ import annotations

import pytest

from semanticmd.errors import InvalidConfiguration
from semanticmd.profiles import load_profile

_PROFILE = """\
default:
  extract_main_content: true
  include_metadata: basic
domains:
  example.com:
    refify_urls: true
  docs.example.com:
    include_metadata: extended
    enable_table_column_tracking: true
"""


@pytest.fixture
def profile_path(tmp_path):
    path = tmp_path / "profile.yaml"
    path.write_text(_PROFILE, encoding="utf-8")
    return path


class TestLoadProfile:
    def test_default_only_without_url(self, profile_path):
        assert load_profile(profile_path) == {
            "extract_main_content": True,
            "include_metadata": "basic",
        }

    def test_domain_overrides_default(self, profile_path):
        cfg = load_profile(profile_path, "https://example.com/post")
        assert cfg["refify_urls"] is True
        assert cfg["include_metadata"] == "basic"

    def test_most_specific_domain_wins(self, profile_path):
        cfg = load_profile(profile_path, "https://docs.example.com/guide")
        assert cfg["include_metadata"] == "extended"
        assert cfg["enable_table_column_tracking"] is True
        assert "refify_urls" not in cfg

    def test_subdomain_matches_parent(self, profile_path):
        cfg = load_profile(profile_path, "https://blog.example.com:8080/x")
        assert cfg["refify_urls"] is True

    def test_unrelated_domain(self, profile_path):
        cfg = load_profile(profile_path, "https://notexample.com/")
        assert "refify_urls" not in cfg

    def test_bare_domain(self, profile_path):
        cfg = load_profile(profile_path, "example.com")
        assert cfg["refify_urls"] is True

    def test_bare_subdomain_with_port(self, profile_path):
        cfg = load_profile(profile_path, "Docs.Example.com:8443")
        assert cfg["include_metadata"] == "extended"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfiguration, match="cannot read profile"):
            load_profile(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_profile(path, "https://example.com") == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("default: [unclosed\n", encoding="utf-8")
        with pytest.raises(InvalidConfiguration):
            load_profile(path)
