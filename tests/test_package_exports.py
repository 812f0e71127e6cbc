"""Tests for top-level package lazy exports."""

from __future__ import annotations

import unittest

import logbus


class PackageExportTests(unittest.TestCase):
    """Ensure __getattr__ and exported symbols behave as expected."""

    def test_lazy_exports_resolve_known_symbols(self) -> None:
        self.assertTrue(callable(logbus.load_config))
        self.assertIsNotNone(logbus.EventBus)
        self.assertIsNotNone(logbus.Logger)
        self.assertIsNotNone(logbus.LoggerOptions)
        self.assertIsNotNone(logbus.EventBusOptions)
        self.assertIsNotNone(logbus.Signature)
        self.assertIsNotNone(logbus.ErrorLevel)
        self.assertIs(logbus.LoggerEvents, logbus.LOGGER_EVENTS)
        self.assertIsNotNone(logbus.LogbusError)
        self.assertIsNotNone(logbus.UnknownEventError)
        self.assertIsNotNone(logbus.EventPayloadError)
        self.assertIsNotNone(logbus.ConfigValidationError)

    def test_every_name_in_all_resolves(self) -> None:
        for name in logbus.__all__:
            self.assertIsNotNone(getattr(logbus, name))

    def test_unknown_symbol_raises_attribute_error(self) -> None:
        with self.assertRaises(AttributeError):
            getattr(logbus, "THIS_DOES_NOT_EXIST")


if __name__ == "__main__":
    unittest.main()
