"""Tests for URL validation, normalization and scope matching."""

import pytest

from scopecrawl.urls import (
    base_domain,
    compile_matcher,
    default_match_pattern,
    is_external,
    is_valid_url,
    normalize_url,
    url_key,
)


class TestIsValidUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com",
            "http://example.com",
            "https://example.com/path",
            "https://example.com/path?query=1",
        ],
    )
    def test_accepts_absolute_urls(self, url):
        assert is_valid_url(url) is True

    @pytest.mark.parametrize("url", ["not-a-url", "", "   ", "example.com", "/relative/path", "https://"])
    def test_rejects_everything_else(self, url):
        assert is_valid_url(url) is False


class TestNormalizeUrl:
    def test_resolves_relative_paths(self):
        assert normalize_url("/page", "https://example.com/docs/") == "https://example.com/page"
        assert normalize_url("sub/page", "https://example.com/docs/") == "https://example.com/docs/sub/page"

    def test_resolves_protocol_relative(self):
        assert normalize_url("//cdn.example.com/a.png", "https://example.com/") == "https://cdn.example.com/a.png"

    def test_keeps_absolute_urls(self):
        assert normalize_url("https://other.com/x?y=1", "https://example.com/") == "https://other.com/x?y=1"

    def test_strips_fragment(self):
        assert normalize_url("/page#section", "https://example.com") == "https://example.com/page"
        assert normalize_url("#top", "https://example.com/a") == "https://example.com/a"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com#top",
            "https://Example.COM/Docs/Page#intro",
            "https://example.com/a/../b?x=1#frag",
        ],
    )
    def test_is_idempotent(self, url):
        once = normalize_url(url, url)
        assert "#" not in once
        assert normalize_url(once, once) == once

    def test_resolves_dot_segments_in_absolute_urls(self):
        base = "https://ex.com/"
        assert normalize_url("https://ex.com/x/../a", base) == "https://ex.com/a"
        assert normalize_url("https://ex.com/./a/./b", base) == "https://ex.com/a/b"
        assert normalize_url("https://ex.com/docs/guide/..", base) == "https://ex.com/docs/"
        assert normalize_url("https://ex.com/docs/./", base) == "https://ex.com/docs/"
        assert normalize_url("https://ex.com/../../a?q=1", base) == "https://ex.com/a?q=1"

    def test_dot_segment_variants_share_a_key(self):
        assert url_key("https://ex.com/x/../a") == url_key("https://ex.com/a")

    def test_adds_root_path_to_bare_host(self):
        assert normalize_url("https://example.com", "https://example.com") == "https://example.com/"

    def test_returns_href_when_resolution_fails(self):
        assert normalize_url("/relative", "not a base url") == "/relative"
        assert normalize_url("http://[::1", "https://example.com/") == "http://[::1"

    def test_non_hierarchical_schemes_pass_through(self):
        assert normalize_url("mailto:team@example.com", "https://example.com/") == "mailto:team@example.com"

    def test_url_key_ignores_trailing_root_and_fragment(self):
        assert url_key("https://ex.com") == url_key("https://ex.com/#top")


class TestBaseDomain:
    def test_extracts_host(self):
        assert base_domain("https://example.com") == "example.com"
        assert base_domain("https://example.com/path") == "example.com"

    def test_strips_www(self):
        assert base_domain("https://www.example.com/") == "example.com"

    def test_returns_empty_string_on_failure(self):
        assert base_domain("not a url") == ""


class TestIsExternal:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/page",
            "https://www.example.com/page",
            "https://blog.example.com/post",
        ],
    )
    def test_same_domain_and_subdomains_are_internal(self, url):
        assert is_external(url, "example.com") is False

    @pytest.mark.parametrize(
        "url",
        [
            "https://other.com/page",
            "https://notexample.com/",
            "https://example.com.evil.org/",
            "mailto:team@example.com",
        ],
    )
    def test_other_hosts_are_external(self, url):
        assert is_external(url, "example.com") is True

    def test_unparsable_urls_are_internal(self):
        assert is_external("/relative", "example.com") is False
        assert is_external("http://[::1", "example.com") is False


class TestCompileMatcher:
    def test_exact_match(self):
        matcher = compile_matcher("https://example.com/page")
        assert matcher.matches("https://example.com/page")
        assert not matcher.matches("https://example.com/other")
        assert not matcher.matches("https://example.com/page/extra")

    def test_single_star_stays_in_segment(self):
        matcher = compile_matcher("https://a.com/*")
        assert matcher.matches("https://a.com/x")
        assert matcher.matches("https://a.com/")
        assert not matcher.matches("https://a.com/x/y")

    def test_double_star_spans_segments(self):
        matcher = compile_matcher("https://a.com/**")
        assert matcher.matches("https://a.com/x/y/z")
        assert matcher.matches("https://a.com/x")

    def test_dots_are_literal(self):
        assert not compile_matcher("https://example.com").matches("https://exampleXcom")

    def test_mixed_wildcards(self):
        matcher = compile_matcher("https://a.com/*/docs/**")
        assert matcher.matches("https://a.com/v1/docs/guide/intro")
        assert not matcher.matches("https://a.com/v1/beta/docs/guide")

    def test_other_regex_characters_are_literal(self):
        matcher = compile_matcher("https://a.com/page?id=*")
        assert matcher.matches("https://a.com/page?id=7")
        assert not matcher.matches("https://a.com/pagid=7")


class TestDefaultMatchPattern:
    def test_appends_double_star_under_seed(self):
        assert default_match_pattern("https://ex.com") == "https://ex.com/**"
        assert default_match_pattern("https://ex.com/docs/") == "https://ex.com/docs/**"
