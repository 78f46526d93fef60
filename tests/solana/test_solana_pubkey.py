import copy
import unittest

import solders.pubkey as _pk

from common.solana.pubkey import SolPubKey


class TestSolPubKey(unittest.TestCase):
    _TOKEN_PROGRAM_KEY = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

    def test_from_string(self):
        key = SolPubKey.from_raw(self._TOKEN_PROGRAM_KEY)
        self.assertEqual(key.to_string(), self._TOKEN_PROGRAM_KEY)
        self.assertEqual(repr(key), self._TOKEN_PROGRAM_KEY)
        self.assertEqual(len(key.to_bytes()), SolPubKey.key_size)

        # addresses pasted by callers often carry spaces
        self.assertEqual(SolPubKey.from_string(f" {self._TOKEN_PROGRAM_KEY}\n"), key)

    def test_from_bytes(self):
        raw = bytes(_pk.Pubkey.new_unique())
        key = SolPubKey.from_raw(raw)
        self.assertEqual(key.to_bytes(), raw)
        self.assertEqual(SolPubKey.from_raw(bytearray(raw)), key)

        with self.assertRaises(ValueError):
            SolPubKey.from_bytes(raw[:-1])

    def test_from_solders(self):
        src = _pk.Pubkey.new_unique()
        key = SolPubKey.from_raw(src)
        self.assertEqual(key, src)
        self.assertIs(SolPubKey.from_raw(key), key)

    def test_wrong_input(self):
        for raw in (None, 12345):
            with self.assertRaises(ValueError):
                SolPubKey.from_raw(raw)  # noqa

        with self.assertRaises(ValueError) as ctx:
            SolPubKey.from_raw("not-a-key")
        self.assertIn("not-a-key", str(ctx.exception))

    def test_compare_and_hash(self):
        key = SolPubKey.from_raw(self._TOKEN_PROGRAM_KEY)
        same_key = SolPubKey.from_raw(self._TOKEN_PROGRAM_KEY)
        other_key = SolPubKey.from_raw(_pk.Pubkey.new_unique())

        self.assertEqual(key, same_key)
        self.assertEqual(key, self._TOKEN_PROGRAM_KEY)
        self.assertEqual(key, key.to_bytes())
        self.assertNotEqual(key, other_key)
        self.assertNotEqual(key, other_key.to_string())
        self.assertNotEqual(key, 12345)
        self.assertEqual(len({key, same_key, other_key}), 2)

    def test_deepcopy(self):
        key = SolPubKey.from_raw(self._TOKEN_PROGRAM_KEY)
        self.assertIs(copy.deepcopy(key), key)


if __name__ == "__main__":
    unittest.main()
