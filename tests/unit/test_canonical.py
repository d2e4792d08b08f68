"""
Unit Tests for Canonical Request Construction

Tests for path/query/header canonicalization and the golden canonical
string of the list-objects request.
"""

import pytest

from bcecloud.canonical import (
    build_canonical_request,
    canonical_headers,
    canonical_query_string,
    canonical_uri,
    query_string,
    uri_encode,
)


GOLDEN_CANONICAL = "GET\n/\nprefix=logs%2F\nhost:mybucket.example.com"


# =============================================================================
# Encoding Tests
# =============================================================================


class TestUriEncode:
    """Tests for percent-encoding."""

    def test_unreserved_characters_untouched(self):
        """Test that A-Za-z0-9-._~ pass through."""
        value = "AZaz09-._~"
        assert uri_encode(value) == value

    def test_reserved_characters_encoded(self):
        """Test that reserved characters are escaped with upper-case hex."""
        assert uri_encode("a b/c:d+e=f&g") == "a%20b%2Fc%3Ad%2Be%3Df%26g"

    def test_non_ascii_encoded_as_utf8(self):
        """Test that non-ASCII text is UTF-8 percent-encoded."""
        assert uri_encode("日志") == "%E6%97%A5%E5%BF%97"

    def test_slash_kept_in_paths(self):
        """Test that path separators survive path encoding."""
        assert canonical_uri("/dir/my file.txt") == "/dir/my%20file.txt"

    def test_empty_path_is_root(self):
        """Test that an empty path canonicalizes to /."""
        assert canonical_uri("") == "/"

    def test_relative_path_gets_leading_slash(self):
        """Test that a path without a leading slash is rooted."""
        assert canonical_uri("key.txt") == "/key.txt"


# =============================================================================
# Query Tests
# =============================================================================


class TestCanonicalQuery:
    """Tests for canonical query strings."""

    def test_order_independent(self):
        """Test that {b:2, a:1} and {a:1, b:2} canonicalize the same."""
        assert canonical_query_string({"b": "2", "a": "1"}) == canonical_query_string(
            {"a": "1", "b": "2"}
        )
        assert canonical_query_string({"b": "2", "a": "1"}) == "a=1&b=2"

    def test_keys_and_values_encoded_independently(self):
        """Test that keys and values are escaped separately."""
        assert canonical_query_string({"a key": "a/value"}) == "a%20key=a%2Fvalue"

    def test_none_value_has_no_equals_sign(self):
        """Test that an absent value emits a bare key."""
        assert canonical_query_string({"acl": None}) == "acl"

    def test_empty_value_keeps_equals_sign(self):
        """Test that an empty value differs from an absent one."""
        assert canonical_query_string({"acl": ""}) == "acl="
        assert canonical_query_string({"acl": ""}) != canonical_query_string({"acl": None})

    def test_integer_values_stringified(self):
        """Test that integer parameters are rendered as decimal."""
        assert canonical_query_string({"maxKeys": 100}) == "maxKeys=100"

    def test_authorization_parameter_excluded(self):
        """Test that an authorization query parameter is never signed."""
        assert canonical_query_string({"authorization": "x", "b": "1"}) == "b=1"

    def test_sorted_by_byte_value(self):
        """Test that upper-case keys sort before lower-case ones."""
        assert canonical_query_string({"b": "1", "B": "2", "a": "3"}) == "B=2&a=3&b=1"

    def test_empty_query(self):
        """Test that no parameters yield an empty string."""
        assert canonical_query_string(None) == ""
        assert canonical_query_string({}) == ""

    def test_wire_query_keeps_caller_order(self):
        """Test that the wire encoding is not sorted."""
        assert query_string({"b": "2", "a": None}) == "b=2&a"


# =============================================================================
# Header Tests
# =============================================================================


class TestCanonicalHeaders:
    """Tests for canonical header selection."""

    def test_case_and_whitespace_insensitive(self):
        """Test that name case and surrounding whitespace are normalized."""
        assert canonical_headers({"Host": " example.com "}) == canonical_headers(
            {"host": "example.com"}
        )

    def test_host_always_signed(self):
        """Test that host is in the signed set."""
        block, names = canonical_headers({"host": "example.com"})
        assert block == "host:example.com"
        assert names == ("host",)

    def test_default_and_prefixed_headers_signed(self):
        """Test the default signable set and the x-bce- prefix."""
        block, names = canonical_headers({
            "Host": "example.com",
            "Content-Type": "text/plain",
            "Content-Length": "5",
            "X-Bce-Date": "2024-01-01T00:00:00Z",
            "X-Bce-Meta-Owner": "ops",
            "User-Agent": "test",
            "Accept": "*/*",
        })
        assert names == (
            "content-length",
            "content-type",
            "host",
            "x-bce-date",
            "x-bce-meta-owner",
        )
        assert block.split("\n") == [
            "content-length:5",
            "content-type:text%2Fplain",
            "host:example.com",
            "x-bce-date:2024-01-01T00%3A00%3A00Z",
            "x-bce-meta-owner:ops",
        ]

    def test_caller_marked_headers_signed(self):
        """Test that extra headers can be marked signable."""
        _, names = canonical_headers(
            {"host": "example.com", "Cache-Control": "no-cache"},
            signed_headers=["Cache-Control"],
        )
        assert names == ("cache-control", "host")

    def test_empty_values_skipped(self):
        """Test that blank headers are not signed."""
        _, names = canonical_headers({"host": "example.com", "content-type": "  "})
        assert names == ("host",)


# =============================================================================
# Canonical Request Tests
# =============================================================================


class TestBuildCanonicalRequest:
    """Tests for the full canonical request."""

    def test_golden_list_objects(self):
        """Test the golden canonical string for a prefixed listing."""
        canonical = build_canonical_request(
            "GET", "/", {"prefix": "logs/"}, {"host": "mybucket.example.com"}
        )
        assert canonical.string == GOLDEN_CANONICAL
        assert canonical.signed_header_names == ("host",)

    def test_deterministic(self):
        """Test that repeated builds are byte-identical."""
        args = ("put", "/a b/c", {"z": "1", "a": None}, {"Host": "h", "x-bce-acl": "private"})
        first = build_canonical_request(*args)
        for _ in range(5):
            assert build_canonical_request(*args) == first
            assert build_canonical_request(*args).string == first.string

    def test_method_upper_cased(self):
        """Test that the method is normalized."""
        assert build_canonical_request("delete", "/k", headers={"host": "h"}).method == "DELETE"

    @pytest.mark.parametrize(
        "left,right",
        [
            ({"host": "example.com"}, {"host": "Example.com"}),
            ({"host": "example.com"}, {"host": "example.org"}),
        ],
    )
    def test_header_value_changes_canonical(self, left, right):
        """Test that header values are compared exactly."""
        assert (
            build_canonical_request("GET", "/", headers=left).string
            != build_canonical_request("GET", "/", headers=right).string
        )
