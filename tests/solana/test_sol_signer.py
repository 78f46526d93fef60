import unittest

import base58

from common.solana.errors import SolDecodeError
from common.solana.pubkey import SolPubKey
from common.solana.signer import SolSigner
from tests.solana.sol_tx_factory import new_secret, new_signer


class TestSolSigner(unittest.TestCase):
    def test_from_keypair_secret(self):
        signer = new_signer()
        secret = new_secret(signer)

        restored = SolSigner.from_base58(secret)
        self.assertEqual(restored.pubkey, signer.pubkey)
        self.assertEqual(restored, signer)

    def test_from_seed_secret(self):
        seed = bytes(range(32))
        signer1 = SolSigner.from_base58(str(base58.b58encode(seed), "utf-8"))
        signer2 = SolSigner.from_bytes(seed)

        self.assertEqual(signer1.to_string(), signer2.to_string())
        self.assertIsInstance(signer1.pubkey, SolPubKey)

    def test_address_is_deterministic(self):
        secret = new_secret(new_signer())
        address_list = [SolSigner.from_base58(secret).to_string() for _ in range(3)]
        self.assertEqual(len(set(address_list)), 1)

    def test_wrong_length(self):
        for size in (0, 10, 31, 33, 63, 65):
            secret = str(base58.b58encode(bytes([1] * size)), "utf-8")
            with self.assertRaises(SolDecodeError):
                SolSigner.from_base58(secret)

    def test_empty_secret(self):
        for secret in ("", "   ", None):
            with self.assertRaises(SolDecodeError):
                SolSigner.from_base58(secret)  # noqa

    def test_bad_base58(self):
        # 0, O, I and l are not in the base58 alphabet
        with self.assertRaises(SolDecodeError):
            SolSigner.from_base58("0OIl" * 11)

    def test_from_raw(self):
        signer = new_signer()
        self.assertIs(SolSigner.from_raw(signer), signer)
        self.assertEqual(SolSigner.from_raw(signer.keypair), signer)
        self.assertEqual(SolSigner.from_raw(bytes(signer.keypair)), signer)
        self.assertEqual(SolSigner.from_raw(new_secret(signer)), signer)
        with self.assertRaises(SolDecodeError):
            SolSigner.from_raw(12345)  # noqa

    def test_secret_is_not_printed(self):
        signer = new_signer()
        secret = new_secret(signer)

        self.assertEqual(str(signer), signer.pubkey.to_string())
        self.assertNotIn(secret, repr(signer))
        self.assertEqual(signer, signer.pubkey.to_string())

    def test_sign_message(self):
        signer = new_signer()
        sig = signer.sign_message(b"message")
        self.assertTrue(sig.verify(signer.keypair.pubkey(), b"message"))


if __name__ == "__main__":
    unittest.main()
