"""Tests for linkwatch.pathinfo module."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from linkwatch.pathinfo import (
    ClickContext,
    PathInfo,
    get_path_info,
    is_local_link,
    is_relative_to,
    relative_path,
    resolve_click,
)
from linkwatch.urls import UrlNormalizer, resolve_url


def path_info_from(root, href, ctx=None):
    return resolve_click(href, root, ctx)


def expect_relative(root, full, rel):
    assert path_info_from(root, full).relative_path == rel

    rebuilt = root + ("" if root.endswith("/") else "/") + rel
    assert path_info_from(root, rebuilt).relative_path == rel, "idempotency"


class TestRelativePathDetection:
    def test_differentiates_by_scheme(self):
        assert not path_info_from("http://example.org", "https://example.org/foo").is_relative

    def test_differentiates_by_host(self):
        assert not path_info_from("http://example.org", "http://google.com/foo").is_relative

    def test_differentiates_by_port(self):
        assert not path_info_from(
            "http://example.org", "http://example.org:8080/foo"
        ).is_relative

    def test_differentiates_by_path(self):
        assert not path_info_from("http://example.org/bar", "http://example.org/foo/bar").is_relative
        assert not path_info_from("http://example.org/fo", "http://example.org/foo").is_relative

    # RFC 3986, sec. 6.2.2.1, case normalization
    def test_case_normalized_schemes(self):
        assert path_info_from("HTTP://example.org", "http://example.org/foo").is_relative

    def test_case_normalized_hosts(self):
        assert path_info_from("http://EXAMPLE.ORG", "http://example.org/foo").is_relative

    def test_case_normalized_percent_encoding(self):
        assert path_info_from("http://example.org/%3A", "http://example.org/%3a/foo").is_relative

    # RFC 3986, sec. 6.2.2.2, percent encoding
    def test_decodes_unreserved_percent_encoded_characters(self):
        assert path_info_from("http://example.org/%41", "http://example.org/A/foo").is_relative

    # RFC 3986, sec. 6.2.2.3, path segment normalization
    def test_normalized_path_segments(self):
        assert path_info_from(
            "http://example.org/./%41/bar/..", "http://example.org/A/foo"
        ).is_relative

    # RFC 3986, sec. 6.2.3 and RFC 7230, sec. 2.7.3
    def test_empty_port_is_scheme_default(self):
        assert path_info_from("http://example.org:/", "http://example.org/foo").is_relative
        assert path_info_from("https://example.org:/", "https://example.org/foo").is_relative

    def test_default_port_and_no_port_are_equivalent(self):
        assert path_info_from("http://example.org:80/", "http://example.org/foo").is_relative
        assert path_info_from("https://example.org:443/", "https://example.org/foo").is_relative

    def test_no_path_is_an_empty_path(self):
        assert path_info_from("http://example.org/", "http://example.org").is_relative

    def test_identical_paths_are_relative(self):
        info = path_info_from("http://example.org/foo", "http://example.org/foo")
        assert info.is_relative
        assert info.relative_path == ""

    def test_query_and_fragment_are_ignored(self):
        info = path_info_from("http://example.org/foo?a=1", "http://example.org/foo/bar?b=2#top")
        assert info.is_relative
        assert info.relative_path == "bar"


class TestRelativizedPathGeneration:
    def test_paths_relative_to_the_root(self):
        expect_relative("http://example.org/foo/", "http://example.org/foo/bar", "bar")

    def test_strips_a_leading_slash(self):
        expect_relative("http://example.org/foo", "http://example.org/foo/bar", "bar")

    def test_nested_segments(self):
        expect_relative("http://example.org/foo", "http://example.org/foo/bar/baz/", "bar/baz/")

    def test_dot_segment_for_leading_empty_component(self):
        expect_relative("http://example.org/foo/", "http://example.org/foo//bar", ".//bar")
        expect_relative("http://example.org/foo", "http://example.org/foo//bar", ".//bar")
        expect_relative("http://example.org/foo//", "http://example.org/foo///bar", ".//bar")

    def test_trailing_slash_after_root_without_one(self):
        assert path_info_from("http://example.org/foo", "http://example.org/foo/").relative_path == ""

    def test_not_relative_has_no_path(self):
        info = path_info_from("http://example.org/foo", "http://example.org/bar")
        assert info.relative_path is None
        assert info.is_local_link is False


class TestLocalLinkDetection:
    def test_plain_click_is_local(self):
        info = path_info_from("http://example.org/", "http://example.org/foo", ClickContext())
        assert info.is_relative is True
        assert info.is_local_link is True

    def test_control_and_meta_keys_are_non_local(self):
        info = path_info_from("http://example.org/", "http://example.org/foo", ClickContext(ctrl_key=True))
        assert (info.is_relative, info.is_local_link) == (True, False), "ctrl"

        info = path_info_from("http://example.org/", "http://example.org/foo", ClickContext(meta_key=True))
        assert (info.is_relative, info.is_local_link) == (True, False), "meta"

    def test_middle_button_is_non_local(self):
        info = path_info_from(
            "http://example.org/", "http://example.org/foo", ClickContext(middle_button=True)
        )
        assert (info.is_relative, info.is_local_link) == (True, False)

    def test_explicit_target_is_non_local(self):
        info = path_info_from(
            "http://example.org/", "http://example.org/foo", ClickContext(has_explicit_target=True)
        )
        assert (info.is_relative, info.is_local_link) == (True, False)

    def test_default_prevented_is_non_local(self):
        info = path_info_from(
            "http://example.org/", "http://example.org/foo", ClickContext(default_prevented=True)
        )
        assert (info.is_relative, info.is_local_link) == (True, False)

    def test_non_relative_is_never_local(self):
        assert is_local_link(False, ClickContext()) is False
        assert is_local_link(False) is False

    def test_missing_context_counts_as_plain_click(self):
        assert is_local_link(True) is True


class TestClickContextFromEvent:
    def test_plain_event(self):
        ctx = ClickContext.from_event(SimpleNamespace(), None)
        assert ctx == ClickContext()

    def test_modifiers_and_button(self):
        event = SimpleNamespace(ctrl_key=True, meta_key=False, which=2, default_prevented=True)
        ctx = ClickContext.from_event(event, None)
        assert ctx.ctrl_key is True
        assert ctx.meta_key is False
        assert ctx.middle_button is True
        assert ctx.default_prevented is True

    def test_left_button_is_not_middle(self):
        assert ClickContext.from_event(SimpleNamespace(which=1)).middle_button is False

    def test_jquery_style_default_prevented(self):
        event = SimpleNamespace(default_prevented=False, is_default_prevented=lambda: True)
        assert ClickContext.from_event(event).default_prevented is True

    def test_anchor_target_attribute(self):
        anchor = {"href": "/foo", "target": "_self"}
        assert ClickContext.from_event(SimpleNamespace(), anchor).has_explicit_target is True

    def test_empty_target_attribute_is_not_explicit(self):
        anchor = {"href": "/foo", "target": ""}
        assert ClickContext.from_event(SimpleNamespace(), anchor).has_explicit_target is False


class TestIsRelativeTo:
    def test_literal_prefix_required(self):
        root = resolve_url("http://example.org/foo/")
        target = resolve_url("http://example.org/foobar/")
        assert is_relative_to(root, target) is False

    def test_root_directory_contains_descendants(self):
        root = resolve_url("http://example.org/foo/")
        assert is_relative_to(root, resolve_url("http://example.org/foo/bar")) is True

    def test_segment_boundary(self):
        root = resolve_url("http://example.org/foo")
        assert is_relative_to(root, resolve_url("http://example.org/foo/bar")) is True
        assert is_relative_to(root, resolve_url("http://example.org/foo.html")) is False

    def test_non_default_port_must_match(self):
        root = resolve_url("http://example.org:8080/")
        assert is_relative_to(root, resolve_url("http://example.org:8080/a")) is True
        assert is_relative_to(root, resolve_url("http://example.org/a")) is False


class TestRelativePath:
    def test_plain_continuation(self):
        root = resolve_url("http://example.org/foo/")
        assert relative_path(root, resolve_url("http://example.org/foo/bar/baz")) == "bar/baz"

    def test_root_slash_followed_by_empty_segments(self):
        root = resolve_url("http://example.org/foo/")
        assert relative_path(root, resolve_url("http://example.org/foo///bar")) == ".///bar"

    def test_single_slash_after_directory_root(self):
        root = resolve_url("http://example.org/foo/")
        assert relative_path(root, resolve_url("http://example.org/foo//")) == ".//"


class TestGetPathInfo:
    def test_carries_target_and_anchor(self):
        root = resolve_url("http://example.org/app/")
        target = resolve_url("http://example.org/app/page?x=1")
        anchor = object()
        info = get_path_info(target, root, anchor=anchor)
        assert isinstance(info, PathInfo)
        assert info.url is target
        assert info.href == "http://example.org/app/page?x=1"
        assert info.anchor is anchor
        assert info.is_local_link is True


class TestResolveClick:
    def test_relative_href_resolved_against_root(self):
        info = resolve_click("bar/baz", "http://example.org/foo/")
        assert info.href == "http://example.org/foo/bar/baz"
        assert info.relative_path == "bar/baz"

    def test_explicit_base(self):
        info = resolve_click(
            "../other/page", "http://example.org/foo/", base_href="http://example.org/foo/sub/"
        )
        assert info.href == "http://example.org/foo/other/page"
        assert info.relative_path == "other/page"

    def test_custom_normalizer(self):
        normalizer = UrlNormalizer({"http": 8080})
        info = resolve_click(
            "http://example.org/foo/bar", "http://example.org:8080/foo", normalizer=normalizer
        )
        assert info.is_relative is True
        assert info.relative_path == "bar"

    def test_parser_errors_propagate(self):
        with pytest.raises(ValueError):
            resolve_click("http://example.org:http/", "http://example.org/")
