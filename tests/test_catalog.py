import json
import unittest
from unittest import mock

import requests

from bookshelf.catalog import AladinAPI, clean_text, normalize_item, split_category
from shared.errors import ClientInputError, ConfigurationError, UpstreamError


def make_response(status_code: int, body) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    text = body if isinstance(body, str) else json.dumps(body, ensure_ascii=False)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


ALADIN_ITEM = {
    "title": "채식주의자 &amp; 소년이 온다",
    "author": "한강 (지은이)",
    "link": "http://www.aladin.co.kr/shop/wproduct.aspx?ItemId=1",
    "cover": "https://image.aladin.co.kr/product/1/cover200/a.jpg",
    "publisher": "창비",
    "isbn": "8936434128",
    "isbn13": "9788936434120",
    "pubDate": "2007-10-30",
    "description": "<b>맨부커</b> 수상작",
    "categoryName": "국내도서>소설/시/희곡>한국소설",
}


class NormalizeTestCase(unittest.TestCase):
    def test_normalize_item_maps_fields(self):
        book = normalize_item(ALADIN_ITEM)
        self.assertEqual(book.title, "채식주의자 & 소년이 온다")
        self.assertEqual(book.author, "한강 (지은이)")
        self.assertEqual(book.publisher, "창비")
        self.assertEqual(book.isbn13, "9788936434120")
        self.assertEqual(book.published, "2007-10-30")
        self.assertEqual(book.description, "맨부커 수상작")
        self.assertEqual(book.genres, ["소설/시/희곡", "한국소설"])

    def test_each_field_takes_first_array_element_independently(self):
        book = normalize_item({"title": ["First", "Second"], "author": "Solo", "link": [], "cover": 42})
        self.assertEqual(book.title, "First")
        self.assertEqual(book.author, "Solo")
        self.assertEqual(book.link, "")
        self.assertEqual(book.cover, "42")
        self.assertIsNone(book.isbn13)
        self.assertEqual(book.genres, [])

    def test_isbn13_falls_back_to_isbn(self):
        self.assertEqual(normalize_item({"title": "T", "isbn": "8936434128"}).isbn13, "8936434128")

    def test_clean_text_and_split_category(self):
        self.assertEqual(clean_text("plain"), "plain")
        self.assertEqual(clean_text("a &lt;b&gt;"), "a <b>")
        self.assertEqual(split_category("국내도서>소설"), ["소설"])
        self.assertEqual(split_category("소설"), ["소설"])
        self.assertEqual(split_category(""), [])


class AladinSearchTestCase(unittest.TestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.api = AladinAPI("ttb-key", session=self.session)

    def test_search_sends_expected_params(self):
        self.session.get.return_value = make_response(200, {"item": [ALADIN_ITEM]})
        books = self.api.search("  채식주의자 ")
        self.assertEqual(len(books), 1)

        url = self.session.get.call_args[0][0]
        params = self.session.get.call_args[1]["params"]
        self.assertEqual(url, "https://www.aladin.co.kr/ttb/api/ItemSearch.aspx")
        self.assertEqual(params["Query"], "채식주의자")
        self.assertEqual(params["ttbkey"], "ttb-key")
        self.assertEqual(params["MaxResults"], 10)
        self.assertEqual(params["Cover"], "MidBig")
        self.assertEqual(params["output"], "js")

    def test_empty_query_makes_no_request(self):
        with self.assertRaises(ClientInputError):
            self.api.search("   ")
        self.session.get.assert_not_called()

    def test_missing_key_is_a_configuration_error(self):
        api = AladinAPI(None, session=self.session)
        with self.assertRaises(ConfigurationError):
            api.search("책")
        self.session.get.assert_not_called()

    def test_http_failure_reports_upstream_detail(self):
        self.session.get.return_value = make_response(503, "Service Unavailable")
        with self.assertRaises(UpstreamError) as ctx:
            self.api.search("책")
        self.assertIn("503", ctx.exception.message)
        self.assertEqual(ctx.exception.details, "Service Unavailable")
        self.assertEqual(self.session.get.call_count, 1)

    def test_aladin_error_code_is_reported(self):
        self.session.get.return_value = make_response(
            200, {"errorCode": 100, "errorMessage": "잘못된 TTBKey 입니다."}
        )
        with self.assertRaises(UpstreamError) as ctx:
            self.api.search("책")
        self.assertIn("잘못된 TTBKey", ctx.exception.message)

    def test_malformed_payload_is_reported(self):
        self.session.get.return_value = make_response(200, "<html>oops</html>")
        with self.assertRaises(UpstreamError):
            self.api.search("책")

        self.session.get.return_value = make_response(200, {"item": "nope"})
        with self.assertRaises(UpstreamError):
            self.api.search("책")

    def test_js_output_quirks_are_tolerated(self):
        body = '{"item": [{"title": "Rock \\\'n\\\' Roll", "author": "A"}]};'
        self.session.get.return_value = make_response(200, body)
        books = self.api.search("rock")
        self.assertEqual(books[0].title, "Rock 'n' Roll")

    def test_connection_errors_become_upstream_errors(self):
        self.session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(UpstreamError):
            self.api.search("책")

    def test_empty_result_list(self):
        self.session.get.return_value = make_response(200, {"totalResults": 0, "item": []})
        self.assertEqual(self.api.search("없는 책"), [])


if __name__ == "__main__":
    unittest.main()
