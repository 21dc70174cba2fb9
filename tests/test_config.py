import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from psycopg.conninfo import conninfo_to_dict

from tribune.config import (
    CategoryConfig,
    Config,
    SourceConfig,
    load_categories,
    load_config,
    load_sources,
    save_sources,
)
from tribune.db.connection import build_conninfo


class TestConfigLoading(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, text):
        path = self.dir / name
        path.write_text(text)
        return path

    def test_defaults(self):
        config = load_config(self.write("config.yaml", ""))
        self.assertEqual(config.store.backend, "postgres")
        self.assertEqual(config.ingestion.timeout, 10.0)
        self.assertEqual(config.ingestion.user_agent, "Tribune News Aggregator/1.0")
        self.assertEqual(config.ingestion.max_redirects, 5)
        self.assertEqual(config.ingestion.failure_threshold, 5)
        self.assertEqual(config.serendipity.window_days, 3)
        self.assertEqual(config.retention.article_days, 30)

    def test_overrides(self):
        path = self.write(
            "config.yaml",
            "store:\n  backend: memory\ningestion:\n  max_concurrent: 3\n  extract_text: false\n",
        )
        config = load_config(path)
        self.assertEqual(config.store.backend, "memory")
        self.assertEqual(config.ingestion.max_concurrent, 3)
        self.assertFalse(config.ingestion.extract_text)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(self.dir / "absent.yaml")

    def test_invalid_yaml(self):
        with self.assertRaises(ValueError):
            load_config(self.write("config.yaml", "ingestion: [unclosed\n"))

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            load_config(self.write("config.yaml", "ingestion:\n  max_concurrent: 0\n"))

    def test_password_from_environment(self):
        path = self.write("config.yaml", "postgres:\n  password_env: TRIBUNE_TEST_PW\n")
        with mock.patch.dict(os.environ, {"TRIBUNE_TEST_PW": "secret"}):
            db_config = Config(path).get_db_config()
        self.assertEqual(db_config["password"], "secret")
        self.assertEqual(db_config["database"], "tribune")

    def test_conninfo(self):
        with mock.patch.dict(os.environ, {"TRIBUNE_TEST_PW": "p@ss word"}):
            conninfo = build_conninfo({"host": "db", "port": 5433, "password_env": "TRIBUNE_TEST_PW"})
        params = conninfo_to_dict(conninfo)
        self.assertEqual(params["host"], "db")
        self.assertEqual(params["port"], "5433")
        self.assertEqual(params["dbname"], "tribune")
        self.assertEqual(params["password"], "p@ss word")

    def test_sibling_paths(self):
        config = Config(self.dir / "config.yaml")
        self.assertEqual(config.sources_path, self.dir / "sources.yaml")
        self.assertEqual(config.categories_path, self.dir / "categories.yaml")


class TestSourcesAndCategories(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_invalid_entries_are_skipped(self):
        path = self.dir / "sources.yaml"
        path.write_text(
            "sources:\n"
            "  - name: Good Feed\n"
            "    url: https://good.example.com/rss\n"
            "  - name: No URL\n"
            "  - name: Bad Priority\n"
            "    url: https://bad.example.com\n"
            "    priority: 99\n"
            "  - name: Listing Page\n"
            "    url: https://scrape.example.com\n"
            "    strategy: scrape\n"
        )
        sources = load_sources(path)

        self.assertEqual([s.name for s in sources], ["Good Feed", "Listing Page"])
        self.assertEqual(sources[0].source_id, "good-feed")
        self.assertEqual(sources[1].strategy, "scrape")
        self.assertIsNone(sources[1].selectors)

    def test_empty_sources_file(self):
        path = self.dir / "sources.yaml"
        path.write_text("")
        self.assertEqual(load_sources(path), [])

    def test_save_then_load_sources(self):
        path = self.dir / "sources.yaml"
        save_sources(
            [
                SourceConfig(
                    name="Scraped",
                    url="https://example.com/news",
                    strategy="scrape",
                    selectors={"container": ".item", "headline": "h2", "link": "a"},
                )
            ],
            path,
        )
        loaded = load_sources(path)
        self.assertEqual(loaded[0].selectors.container, ".item")
        self.assertIsNone(loaded[0].selectors.summary)

    def test_category_blank_rules_dropped(self):
        category = CategoryConfig(name="Tech News", keywords=["ai", "  ", ""], domains=[" example.com "])
        self.assertEqual(category.keywords, ["ai"])
        self.assertEqual(category.domains, ["example.com"])
        self.assertEqual(category.category_slug, "tech-news")
        self.assertEqual(category.category_id, "tech-news")

    def test_load_categories(self):
        path = self.dir / "categories.yaml"
        path.write_text(
            "categories:\n"
            "  - name: Science\n"
            "    keywords: [research, space]\n"
            "    order: 2\n"
        )
        categories = load_categories(path)
        self.assertEqual(categories[0].category_slug, "science")
        self.assertEqual(categories[0].keywords, ["research", "space"])


if __name__ == "__main__":
    unittest.main()
