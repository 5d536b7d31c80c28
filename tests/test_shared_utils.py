import os
import unittest
from unittest import mock

from shared.config import Settings
from shared.errors import ClientInputError, ConfigurationError, UpstreamError
from shared.utils import (
    clean_multi_select_value,
    get_aladin_key,
    get_database_id,
    get_notion_token,
    is_blank,
    pick_first,
)


class UtilsTestCase(unittest.TestCase):
    def test_clean_multi_select_value_truncates_and_strips(self):
        dirty_value = " Action,  Adventure;\nEpic Saga "
        self.assertEqual(clean_multi_select_value(dirty_value), "Action Adventure Epic Saga")
        self.assertEqual(len(clean_multi_select_value("x" * 150)), 100)

    def test_pick_first_prefers_first_list_element(self):
        self.assertEqual(pick_first(["first", "second"]), "first")
        self.assertEqual(pick_first("scalar"), "scalar")
        self.assertEqual(pick_first(9788937460449), "9788937460449")
        self.assertEqual(pick_first([]), "")
        self.assertEqual(pick_first([{"nested": True}]), "")
        self.assertEqual(pick_first(None), "")

    def test_is_blank(self):
        for value in (None, "", "   ", [], {}, ()):
            self.assertTrue(is_blank(value), value)
        for value in ("x", 0, False, ["a"], {"start": "2024-01-01"}):
            self.assertFalse(is_blank(value), value)


class EnvironmentTestCase(unittest.TestCase):
    def test_notion_token_prefers_internal_secret(self):
        env = {"NOTION_INTERNAL_INTEGRATION_SECRET": "secret", "NOTION_TOKEN": "legacy"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(get_notion_token(), "secret")

    def test_notion_token_accepts_api_key_name(self):
        with mock.patch.dict(os.environ, {"NOTION_API_KEY": "key"}, clear=True):
            self.assertEqual(get_notion_token(), "key")

    def test_database_id_falls_back_in_order(self):
        with mock.patch.dict(os.environ, {"NOTION_DATABASE_ID": "generic"}, clear=True):
            self.assertEqual(get_database_id(), "generic")
        env = {"NOTION_BOOKS_DATABASE_ID": "books", "NOTION_DATABASE_ID": "generic"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(get_database_id(), "books")

    def test_blank_values_count_as_missing(self):
        with mock.patch.dict(os.environ, {"ALADIN_TTB_KEY": "  ", "ALADIN_KEY": "ttb"}, clear=True):
            self.assertEqual(get_aladin_key(), "ttb")

    def test_settings_from_env_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        self.assertIsNone(settings.notion_token)
        self.assertEqual(settings.notion_version, "2022-06-28")
        self.assertEqual(settings.schema_ttl, 30.0)
        self.assertEqual(settings.aladin_query_type, "Keyword")

    def test_settings_rejects_bad_ttl(self):
        with mock.patch.dict(os.environ, {"NOTION_SCHEMA_TTL": "soon"}, clear=True):
            with self.assertRaises(ConfigurationError):
                Settings.from_env()

    def test_require_notion_lists_missing_variables(self):
        settings = Settings(notion_token="token")
        with self.assertRaises(ConfigurationError) as ctx:
            settings.require_notion()
        self.assertIn("NOTION_BOOKS_DATABASE_ID", ctx.exception.message)
        self.assertNotIn("NOTION_TOKEN", ctx.exception.message)
        Settings(notion_token="token", database_id="db").require_notion()


class ErrorsTestCase(unittest.TestCase):
    def test_error_status_codes(self):
        self.assertEqual(ConfigurationError("x").status_code, 500)
        self.assertEqual(ClientInputError("x").status_code, 400)
        self.assertIsInstance(ClientInputError("x"), ValueError)

    def test_upstream_error_keeps_specific_status(self):
        self.assertEqual(UpstreamError("x", upstream_status=404).status_code, 404)
        self.assertEqual(UpstreamError("x", upstream_status=200).status_code, 500)
        self.assertEqual(UpstreamError("x").status_code, 500)

    def test_to_dict_includes_details_only_when_present(self):
        self.assertEqual(ConfigurationError("missing").to_dict(), {"ok": False, "message": "missing"})
        self.assertEqual(
            UpstreamError("failed", details={"code": "validation_error"}).to_dict(),
            {"ok": False, "message": "failed", "details": {"code": "validation_error"}},
        )


if __name__ == "__main__":
    unittest.main()
