import logging
import os
from dataclasses import FrozenInstanceError
import unittest
from unittest import mock

from eduresults.config import settings as settings_module
from eduresults.config.logging_setup import configure_logging, resolve_level


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(settings_module._int_env("RESULTS_DEFAULT_PASS_MARK", 50), 50)

    def test_int_env_parsing(self):
        with mock.patch.dict(os.environ, {"RESULTS_DEFAULT_PASS_MARK": "40"}):
            self.assertEqual(settings_module._int_env("RESULTS_DEFAULT_PASS_MARK", 50), 40)
        with mock.patch.dict(os.environ, {"RESULTS_DEFAULT_PASS_MARK": "forty"}):
            self.assertEqual(settings_module._int_env("RESULTS_DEFAULT_PASS_MARK", 50), 50)

    def test_settings_are_frozen(self):
        with self.assertRaises(FrozenInstanceError):
            settings_module.settings.default_pass_mark = 10


class LoggingSetupTests(unittest.TestCase):
    def test_resolve_level(self):
        self.assertEqual(resolve_level("debug"), logging.DEBUG)
        self.assertEqual(resolve_level("INFO"), logging.INFO)
        self.assertEqual(resolve_level("chatty"), logging.WARNING)

    def test_configure_logging_sets_package_level(self):
        logger = logging.getLogger("eduresults")
        previous = logger.level
        try:
            configure_logging("DEBUG")
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(previous)


if __name__ == "__main__":
    unittest.main()
