import logging
import unittest

from record_schema import Registry, create_logger
from record_schema.log import LOG_FORMAT


class TestCreateLogger(unittest.TestCase):

    def test_single_handler_per_logger(self):
        logger = create_logger("record_schema.tests.single")
        create_logger("record_schema.tests.single")
        own = [handler for handler in logger.handlers if type(handler) is logging.StreamHandler]
        self.assertEqual(len(own), 1)
        self.assertEqual(own[0].formatter._fmt, LOG_FORMAT)
        self.assertFalse(logger.propagate)

    def test_explicit_level(self):
        logger = create_logger("record_schema.tests.level", level=logging.DEBUG, propagate=True)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertTrue(logger.propagate)

    def test_registry_replacement_is_logged(self):
        registry = Registry()
        with self.assertLogs("record_schema.transforms", level="INFO") as captured:
            registry.transforms.register("trim", lambda value: value)
        self.assertIn("Replacing transform 'trim'", captured.output[0])


if __name__ == "__main__":
    unittest.main()
