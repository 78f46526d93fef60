import json
import logging
import sys
import unittest

from common.config.config import Config
from common.config.utils import LogMsgFilter
from common.utils.json_logger import JSONFormatter, ContextFilter, Logger, log_msg, logging_context
from tests.solana.sol_tx_factory import new_signer


class TestJsonLogger(unittest.TestCase):
    def setUp(self):
        self.formatter = JSONFormatter()
        self.ctx_filter = ContextFilter()

    def _format(self, msg, extra: dict | None = None, exc_info=None) -> dict:
        record = logging.LogRecord("test", logging.INFO, __file__, 10, msg, None, exc_info)
        for key, value in (extra or dict()).items():
            setattr(record, key, value)
        self.ctx_filter.filter(record)
        return json.loads(self.formatter.format(record))

    def test_str_message(self):
        msg = self._format("hello world")
        self.assertEqual(msg["message"], "hello world")
        self.assertEqual(msg["level"], "INFO")
        self.assertIn("date", msg)

    def test_dict_message(self):
        msg = self._format(log_msg("send {Method} to {Path}", Method="POST", Path="/api/create"))
        self.assertEqual(msg["message"], "send POST to /api/create")

    def test_signer_in_message(self):
        signer = new_signer()
        msg = self._format(log_msg("sign with {Signer}", Signer=signer))
        self.assertEqual(msg["message"], f"sign with {signer.to_string()}")

    def test_msg_filter(self):
        cfg = Config(api_url="https://api.example.com", rpc_url="https://rpc.example.com/?api-key=secret")
        msg_filter = LogMsgFilter(cfg)

        msg = self._format(log_msg("request to {Path}", Path=cfg.rpc_url), msg_filter)
        self.assertEqual(msg["message"], "request to *****")

        msg = self._format("request to " + cfg.api_url + "/health", msg_filter)
        self.assertEqual(msg["message"], "request to *****/health")

    def test_context(self):
        with logging_context(op="distribute"):
            with logging_context(bundle=2):
                msg = self._format("inner")
            self.assertEqual(msg["op"], "distribute")
            self.assertEqual(msg["bundle"], 2)

            msg = self._format("outer")
            self.assertNotIn("bundle", msg)

        msg = self._format("none")
        self.assertNotIn("op", msg)

    def test_exc_info(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            msg = self._format("failed", exc_info=sys.exc_info())

        self.assertEqual(msg["exc_info"]["error"], "bad value")
        self.assertTrue(msg["exc_info"]["traceback"])

    def test_setup_json_format(self):
        root = logging.getLogger()
        handler = logging.StreamHandler()
        root.addHandler(handler)
        try:
            Logger.setup(json_format=True)
            self.assertIsInstance(handler.formatter, JSONFormatter)
            self.assertTrue(any(isinstance(item, ContextFilter) for item in handler.filters))
        finally:
            root.removeHandler(handler)

    def test_enable_debug(self):
        logger = logging.getLogger("fury_sdk.test_json_logger")
        old_level = logger.level
        try:
            Logger.enable_debug(["fury_sdk.test_json_logger"])
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(old_level)


if __name__ == "__main__":
    unittest.main()
