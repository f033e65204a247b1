from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from lambda_proxy_utils.negotiation import (  # noqa: E402
    accepts_charsets,
    accepts_types,
    best_match,
    preferred_charsets,
    preferred_encodings,
    preferred_languages,
    preferred_media_types,
    type_is,
)


class TestMediaTypes(unittest.TestCase):
    def test_orders_accepted_types_by_quality_then_position(self) -> None:
        self.assertEqual(
            preferred_media_types("text/plain;q=0.5, application/json, text/html"),
            ["application/json", "text/html", "text/plain"],
        )
        self.assertEqual(preferred_media_types(None), ["*/*"])
        self.assertEqual(preferred_media_types(""), [])

    def test_specificity_picks_the_rule_before_quality_ranks_candidates(self) -> None:
        header = "application/json;q=0.1, */*;q=0.9"
        self.assertEqual(
            preferred_media_types(header, ["application/json", "text/html"]),
            ["text/html", "application/json"],
        )
        self.assertEqual(best_match(header, ["application/json", "text/html"]), "text/html")

    def test_zero_quality_excludes(self) -> None:
        self.assertEqual(preferred_media_types("text/html;q=0, */*", ["text/html", "image/png"]), ["image/png"])
        self.assertIsNone(best_match("image/png", ["text/html"]))

    def test_parameters_must_match(self) -> None:
        self.assertIsNone(best_match("text/html;level=1", ["text/html"]))
        self.assertEqual(best_match("text/html;level=1", ["text/html;level=1"]), "text/html;level=1")

    def test_quoted_commas_do_not_split_entries(self) -> None:
        self.assertEqual(
            preferred_media_types('text/html;foo="a,b", application/json'),
            ["text/html", "application/json"],
        )

    def test_candidate_order_breaks_ties(self) -> None:
        self.assertEqual(best_match("*/*", ["text/html", "application/json"]), "text/html")
        self.assertEqual(best_match("*/*", ["application/json", "text/html"]), "application/json")

    def test_accepts_types_maps_extensions(self) -> None:
        self.assertEqual(accepts_types("image/webp,image/*", "gif"), "gif")
        self.assertIs(accepts_types("image/webp,image/*", "json"), False)
        self.assertIs(accepts_types("text/html", "not-a-known-ext"), False)
        self.assertEqual(accepts_types(None, "html"), "html")
        self.assertEqual(accepts_types("", ["png", "gif"]), "png")


class TestOtherAcceptHeaders(unittest.TestCase):
    def test_charsets(self) -> None:
        self.assertEqual(preferred_charsets("utf-8, iso-8859-1;q=0"), ["utf-8"])
        self.assertIs(accepts_charsets("utf-8, iso-8859-1;q=0", "iso-8859-1"), False)
        self.assertEqual(accepts_charsets(None, "latin1", "utf-8"), "latin1")

    def test_encodings_include_identity(self) -> None:
        self.assertEqual(preferred_encodings(None), ["identity"])
        self.assertEqual(preferred_encodings("gzip;q=0.5"), ["gzip", "identity"])
        self.assertEqual(preferred_encodings("gzip, identity;q=0", ["identity", "gzip"]), ["gzip"])

    def test_languages(self) -> None:
        self.assertEqual(preferred_languages("en-US,en;q=0.8,*;q=0.1"), ["en-US", "en", "*"])
        self.assertEqual(preferred_languages("en", ["en-GB", "fr"]), ["en-GB"])
        self.assertEqual(preferred_languages(None, ["fr", "de"]), ["fr", "de"])


class TestTypeIs(unittest.TestCase):
    def test_returns_matching_pattern_or_actual_type(self) -> None:
        self.assertEqual(type_is("text/html; charset=utf-8", "html"), "html")
        self.assertEqual(type_is("text/html; charset=utf-8", "text/html"), "text/html")
        self.assertEqual(type_is("text/html; charset=utf-8", "text/*"), "text/html")
        self.assertEqual(type_is("text/html"), "text/html")
        self.assertIs(type_is("text/html", "json"), False)

    def test_special_tokens(self) -> None:
        self.assertEqual(type_is("application/x-www-form-urlencoded", "urlencoded"), "urlencoded")
        self.assertEqual(type_is("multipart/form-data; boundary=x", "multipart"), "multipart")
        self.assertEqual(type_is("application/vnd.api+json", "+json"), "application/vnd.api+json")
        self.assertIs(type_is("application/json", "+xml"), False)

    def test_invalid_or_missing_content_type(self) -> None:
        self.assertIs(type_is(None, "html"), False)
        self.assertIs(type_is("", "html"), False)
        self.assertIs(type_is("not a type", "html"), False)


if __name__ == "__main__":
    unittest.main()
