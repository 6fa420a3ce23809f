"""Tests for settings and bundled data locations."""

import logging

import config


class TestPaths:
    def test_bundled_data_next_to_modules(self):
        assert config.SCHEMA_PATH.is_file()
        assert config.SAMPLE_PATH.is_file()
        assert (config.THEMES_DIR / config.DEFAULT_THEME / "index.html").is_file()

    def test_paths_are_under_app_dir(self):
        for path in (config.SCHEMA_PATH, config.SAMPLE_PATH, config.THEMES_DIR):
            assert path.is_relative_to(config.APP_DIR)


class TestLogging:
    def test_cssutils_logger_silenced(self):
        config.configure_logging()
        assert logging.getLogger("CSSUTILS").level == logging.CRITICAL
