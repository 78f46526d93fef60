import os
import unittest
from unittest import mock

from common.config.config import Config
from common.config.constants import DEFAULT_API_URL, DEFAULT_RPC_URL


class TestConfig(unittest.TestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        cfg = Config()
        self.assertEqual(cfg.api_url, DEFAULT_API_URL)
        self.assertEqual(cfg.rpc_url, DEFAULT_RPC_URL)
        self.assertEqual(cfg.max_bundles_per_sec, 2)
        self.assertEqual(cfg.rate_limit_delay_sec, 0.5)
        self.assertEqual(cfg.max_recipients_per_batch, 3)
        self.assertEqual(cfg.timeout_sec, 60.0)
        self.assertFalse(cfg.debug)
        self.assertTrue(cfg.hide_sensitive_info)

    @mock.patch.dict(
        os.environ,
        {
            "FURY_API_URL": "https://api.example.com/ ",
            "SOLANA_RPC_URL": "https://rpc.example.com/?api-key=secret",
            "MAX_BUNDLES_PER_SECOND": "5",
            "RATE_LIMIT_DELAY_MSEC": "250",
            "FURY_DEBUG": "yes",
        },
        clear=True,
    )
    def test_env(self):
        cfg = Config()
        self.assertEqual(cfg.api_url, "https://api.example.com")
        self.assertEqual(cfg.rpc_url, "https://rpc.example.com/?api-key=secret")
        self.assertEqual(cfg.max_bundles_per_sec, 5)
        self.assertEqual(cfg.rate_limit_delay_sec, 0.25)
        self.assertTrue(cfg.debug)

    @mock.patch.dict(os.environ, {"FURY_API_URL": "https://env.example.com", "MAX_BUNDLES_PER_SECOND": "7"}, clear=True)
    def test_override(self):
        cfg = Config(api_url="https://arg.example.com/", max_bundles_per_sec=3, debug=True)
        self.assertEqual(cfg.api_url, "https://arg.example.com")
        self.assertEqual(cfg.max_bundles_per_sec, 3)
        self.assertTrue(cfg.debug)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_independent_instances(self):
        cfg1 = Config(api_url="https://one.example.com")
        cfg2 = Config(api_url="https://two.example.com")
        self.assertNotEqual(cfg1.api_url, cfg2.api_url)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_clamp(self):
        cfg = Config(max_bundles_per_sec=0, max_recipients_per_batch=1000, timeout_sec=0)
        with self.assertLogs("common.config.config", level="WARNING"):
            self.assertEqual(cfg.max_bundles_per_sec, 1)
        self.assertEqual(cfg.max_recipients_per_batch, 100)
        self.assertEqual(cfg.timeout_sec, 1.0)

    @mock.patch.dict(os.environ, {"MAX_BUNDLES_PER_SECOND": "many", "FURY_DEBUG": "maybe"}, clear=True)
    def test_bad_value(self):
        cfg = Config()
        self.assertEqual(cfg.max_bundles_per_sec, 2)
        self.assertFalse(cfg.debug)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_sensitive_info(self):
        cfg = Config(api_url="https://api.example.com", rpc_url="https://rpc.example.com/?api-key=secret")
        self.assertEqual(cfg.sensitive_info_list, ("https://rpc.example.com/?api-key=secret", "https://api.example.com"))


if __name__ == "__main__":
    unittest.main()
