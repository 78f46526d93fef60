from __future__ import annotations

import json
import unittest
from unittest import mock

from aiohttp import web
from aiohttp.test_utils import TestServer as AioTestServer

from common.config.config import Config
from common.http.errors import HttpResponseFormatError, HttpTransportError
from common.solana_rpc.client import SolClient
from fury_sdk import FurySdk
from fury_sdk.api import (
    BundleResultKind,
    Platform,
    Protocol,
    QuoteAction,
    RecipientModel,
    TokenBuyConfig,
    TokenCleanerConfig,
    TokenCreateConfig,
    TokenMetadata,
    TokenSellConfig,
    Wallet,
)
from fury_sdk.api_client import FuryApiClient
from fury_sdk.errors import FuryRemoteError, FuryValidationError
from tests.solana.sol_tx_factory import new_secret, new_signer


class TestFuryApiClient(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.request_list: list[tuple[str, str, dict | None]] = list()
        self.resp_dict: dict[str, tuple[int, dict | list | str]] = dict()

        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        self.server = AioTestServer(app)
        await self.server.start_server()

        self.cfg = Config(api_url=str(self.server.make_url("/")), rpc_url="https://rpc.example.com")
        self.client = FuryApiClient(self.cfg)

    async def asyncTearDown(self):
        await self.client.stop()
        await self.server.close()

    async def _handle(self, request: web.Request) -> web.Response:
        body = await request.text()
        self.request_list.append((request.method, request.path, json.loads(body) if body else None))

        status, data = self.resp_dict.get(request.path, (404, {"error": "Not found"}))
        if isinstance(data, str):
            return web.Response(status=status, text=data)
        return web.json_response(data, status=status)

    def _set_resp(self, path: str, data: dict | list | str, status: int = 200) -> None:
        self.resp_dict[path] = (status, data)

    async def test_distribute(self):
        self._set_resp("/api/wallets/distribute", {"success": True, "transactions": ["tx1", "tx2"]})

        recipient_list = [RecipientModel(address="Addr1", amount="0.1"), RecipientModel(address="Addr2", amount="0.2")]
        tx_list = await self.client.get_distribute_tx_list("Sender", recipient_list)

        self.assertEqual(tx_list, ("tx1", "tx2"))
        method, path, body = self.request_list[0]
        self.assertEqual(method, "POST")
        self.assertEqual(
            body,
            {
                "sender": "Sender",
                "recipients": [{"address": "Addr1", "amount": "0.1"}, {"address": "Addr2", "amount": "0.2"}],
            },
        )

    async def test_tx_list_shapes(self):
        self._set_resp("/api/wallets/mixer", {"success": True, "data": {"transactions": ["tx1"]}})
        self.assertEqual(await self.client.get_mixer_tx_list("Sender", []), ("tx1",))

        self._set_resp("/api/wallets/consolidate", {"success": True, "message": "nothing to do"})
        with self.assertRaises(FuryRemoteError) as ctx:
            await self.client.get_consolidate_tx_list(["Src"], "Receiver", 50)
        self.assertEqual(str(ctx.exception), "No transactions returned from backend")
        self.assertEqual(
            self.request_list[-1][2],
            {"sourceAddresses": ["Src"], "receiverAddress": "Receiver", "percentage": 50.0},
        )

    async def test_remote_failure(self):
        self._set_resp("/api/wallets/distribute", {"success": False, "error": "Sender has no funds"})
        with self.assertRaises(FuryRemoteError) as ctx:
            await self.client.get_distribute_tx_list("Sender", [])
        self.assertEqual(ctx.exception.message, "Sender has no funds")

        self._set_resp("/api/wallets/mixer", {"success": False})
        with self.assertRaises(FuryRemoteError) as ctx:
            await self.client.get_mixer_tx_list("Sender", [])
        self.assertEqual(ctx.exception.message, "Failed to get partially signed transactions")

    async def test_http_error(self):
        self._set_resp("/api/tokens/burn", "Internal error", status=500)
        with self.assertRaises(HttpTransportError) as ctx:
            await self.client.get_burn_tx_list("Wallet", "Mint", "10")

        self.assertEqual(ctx.exception.status, 500)
        self.assertIn("HTTP error! Status: 500 - Internal error", str(ctx.exception))
        self.assertTrue(ctx.exception.url.endswith("/api/tokens/burn"))

    async def test_wrong_json(self):
        self._set_resp("/api/tokens/burn", "<html>maintenance</html>")
        with self.assertRaises(HttpResponseFormatError):
            await self.client.get_burn_tx_list("Wallet", "Mint", "10")

    async def test_connection_error(self):
        client = FuryApiClient(Config(api_url="http://127.0.0.1:1", timeout_sec=5))
        try:
            with self.assertRaises(HttpTransportError) as ctx:
                await client.health_check()
            self.assertIn("Request failed", str(ctx.exception))
            self.assertIsNone(ctx.exception.status)
        finally:
            await client.stop()

    async def test_buy_bundles(self):
        self._set_resp(
            "/api/tokens/buy",
            {"success": True, "bundles": [["tx1", "tx2"], {"transactions": ["tx3"]}, []]},
        )
        cfg = TokenBuyConfig(token_address="Mint", sol_amount=0.5, protocol="pumpfun")
        bundle_list = await self.client.get_buy_bundle_list(["Addr1", "Addr2"], cfg)

        self.assertEqual([bundle.tx_list for bundle in bundle_list], [("tx1", "tx2"), ("tx3",)])
        self.assertEqual(
            self.request_list[0][2],
            {
                "walletAddresses": ["Addr1", "Addr2"],
                "tokenAddress": "Mint",
                "protocol": "pumpfun",
                "solAmount": 0.5,
                "slippageBps": 100,
                "jitoTipLamports": 5000,
            },
        )

    async def test_buy_flat_list(self):
        self._set_resp("/api/tokens/buy", {"success": True, "transactions": [f"tx{i}" for i in range(7)]})
        cfg = TokenBuyConfig(token_address="Mint", sol_amount=1, protocol=Protocol.Raydium, slippage_bps=300)
        bundle_list = await self.client.get_buy_bundle_list(["Addr1"], cfg, [0.1, 0.2])

        self.assertEqual([len(bundle) for bundle in bundle_list], [5, 2])
        body = self.request_list[0][2]
        self.assertEqual(body["amounts"], [0.1, 0.2])
        self.assertEqual(body["slippageBps"], 300)

    async def test_invalid_bundle(self):
        self._set_resp("/api/tokens/sell", {"success": True, "bundles": [["tx1"], {"tx": 1}]})
        cfg = TokenSellConfig(token_address="Mint", sell_percent=50, protocol="moonshot")
        with self.assertRaises(FuryRemoteError) as ctx:
            await self.client.get_sell_bundle_list(["Addr1"], cfg)
        self.assertEqual(str(ctx.exception), "Invalid bundle format in the backend response")

    async def test_wrong_request_types(self):
        cfg = TokenBuyConfig(token_address="Mint", sol_amount=0.5, protocol="pumpfun", slippage_bps=150.0)
        with self.assertRaises(FuryValidationError) as ctx:
            await self.client.get_buy_bundle_list(["Addr1"], cfg)
        self.assertIn("'slippage_bps'", str(ctx.exception))

        cfg = TokenSellConfig(token_address="Mint", sell_percent=50, protocol="pumpfun", jito_tip_lamports=1000.5)
        with self.assertRaises(FuryValidationError):
            await self.client.get_sell_bundle_list(["Addr1"], cfg)

        with self.assertRaises(FuryValidationError):
            await self.client.get_burn_tx_list("Owner", 12345, "10")  # noqa

        self.assertEqual(self.request_list, [])

    async def test_wrong_request_types_as_result(self):
        sdk = FurySdk(self.cfg, api_client=self.client, sol_client=mock.AsyncMock(spec=SolClient))
        wallet = Wallet(new_secret(new_signer()))
        cfg = TokenBuyConfig(token_address="Mint", sol_amount=0.5, protocol="pumpfun", slippage_bps=150.0)

        res = await sdk.buy_token_single(wallet, cfg)

        self.assertFalse(res.success)
        self.assertTrue(res.error.startswith("Invalid TokenBuyRequest: the parameter 'slippage_bps'"))
        self.assertEqual(self.request_list, [])

    async def test_sell_percentage(self):
        self._set_resp("/api/tokens/sell", {"success": True, "bundles": [["tx1"]]})
        cfg = TokenSellConfig(token_address="Mint", sell_percent=50, protocol="moonshot")

        await self.client.get_sell_bundle_list(["Addr1"], cfg)
        await self.client.get_sell_bundle_list(["Addr1"], cfg, 25)

        self.assertEqual(self.request_list[0][2]["percentage"], 50.0)
        self.assertEqual(self.request_list[1][2]["percentage"], 25.0)

    async def test_create(self):
        self._set_resp("/api/create", {"success": True, "bundles": [{"transactions": ["tx1", "tx2"]}]})
        cfg = TokenCreateConfig(
            platform=Platform.Pump,
            metadata=TokenMetadata(name="Fury", symbol="FURY", image="https://img.example.com/fury.png"),
            wallets=["Addr1", "Addr2"],
            amounts=[0.1, 0.2],
            platform_config={"type": "meme"},
        )
        bundle_list = await self.client.get_create_bundle_list(cfg)

        self.assertEqual(len(bundle_list), 1)
        self.assertEqual(
            self.request_list[0][2],
            {
                "platform": "pump",
                "metadata": {"name": "Fury", "symbol": "FURY", "image": "https://img.example.com/fury.png"},
                "wallets": ["Addr1", "Addr2"],
                "amounts": [0.1, 0.2],
                "platformConfig": {"type": "meme"},
            },
        )

    async def test_transfer(self):
        self._set_resp("/api/tokens/transfer", {"success": True, "data": {"transactions": ["tx1"]}})
        tx_list = await self.client.get_transfer_tx_list("Sender", "Receiver", "1.5")

        self.assertEqual(tx_list, ("tx1",))
        self.assertEqual(self.request_list[0][2], {"senderPublicKey": "Sender", "receiver": "Receiver", "amount": "1.5"})

        self._set_resp("/api/tokens/transfer", {"success": True, "transactions": ["tx1"]})
        with self.assertRaises(FuryRemoteError) as ctx:
            await self.client.get_transfer_tx_list("Sender", "Receiver", "1.5", "Mint")
        self.assertEqual(str(ctx.exception), "No transactions received from API")
        self.assertEqual(self.request_list[1][2]["tokenAddress"], "Mint")

    async def test_cleaner(self):
        self._set_resp("/api/tokens/cleaner", {"success": True, "transactions": ["tx1", "tx2"]})

        cfg = TokenCleanerConfig(token_address="Mint", sell_percentage=50, buy_percentage=40, buy_amount=0.2)
        tx_list = await self.client.get_cleaner_tx_list("Seller", "Buyer", ["Seller", "Buyer"], cfg)

        self.assertEqual(tx_list, ("tx1", "tx2"))
        self.assertEqual(
            self.request_list[0][2],
            {
                "sellerAddress": "Seller",
                "buyerAddress": "Buyer",
                "tokenAddress": "Mint",
                "sellPercentage": 50.0,
                "buyPercentage": 40.0,
                "walletAddresses": ["Seller", "Buyer"],
                "buyAmount": 0.2,
            },
        )

    async def test_pnl(self):
        self._set_resp(
            "/api/analytics/pnl",
            {"success": True, "data": {"Addr1": {"profit": 1.25, "timestamp": "2024-01-01T00:00:00Z"}, "Addr2": {"profit": -0.5}}},
        )
        pnl_dict = await self.client.get_pnl(["Addr1", "Addr2"], "Mint")

        self.assertEqual(pnl_dict["Addr1"].profit, 1.25)
        self.assertEqual(pnl_dict["Addr1"].timestamp, "2024-01-01T00:00:00Z")
        self.assertIsNone(pnl_dict["Addr2"].timestamp)
        self.assertEqual(
            self.request_list[0][2],
            {"addresses": "Addr1,Addr2", "tokenAddress": "Mint", "options": {"includeTimestamp": True}},
        )

        self._set_resp("/api/analytics/pnl", {"success": True, "data": {"Addr1": {"timestamp": "x"}}})
        with self.assertRaises(HttpResponseFormatError):
            await self.client.get_pnl(["Addr1"], "Mint", include_timestamp=False)
        self.assertEqual(self.request_list[1][2]["options"], {"includeTimestamp": False})

        self._set_resp("/api/analytics/pnl", {"success": True})
        with self.assertRaises(FuryRemoteError):
            await self.client.get_pnl(["Addr1"], "Mint")

    async def test_send_bundle(self):
        self._set_resp("/api/transactions/send", {"success": True, "result": {"jito": "bundle-id"}})
        result = await self.client.send_bundle(["tx1", "tx2"])

        self.assertEqual(result.kind, BundleResultKind.Jito)
        self.assertEqual(result.bundle_id, "bundle-id")
        self.assertEqual(self.request_list[0][2], {"transactions": ["tx1", "tx2"]})

    async def test_send_transaction(self):
        self._set_resp("/api/transactions/send", {"success": True, "result": {"rpc": ["sig1"]}})
        result = await self.client.send_transaction(["tx1"], use_rpc=True)

        self.assertEqual(result.signature_list, ("sig1",))
        self.assertEqual(self.request_list[0][2], {"transactions": ["tx1"], "useRpc": True})

        with self.assertRaises(FuryValidationError):
            await self.client.send_transaction([])

    async def test_send_accepted_without_result(self):
        self._set_resp("/api/transactions/send", {"success": True})
        result = await self.client.send_bundle(["tx1"])
        self.assertTrue(result.is_ok)

        self._set_resp("/api/transactions/send", {"jsonrpc": "2.0", "id": 1, "result": None})
        result = await self.client.send_bundle(["tx1"])
        self.assertTrue(result.is_ok)

        self._set_resp("/api/transactions/send", {"success": False, "error": "Simulation failed"})
        with self.assertRaises(FuryRemoteError):
            await self.client.send_bundle(["tx1"])

    async def test_route_quote(self):
        self._set_resp(
            "/api/tokens/route",
            {
                "success": True,
                "action": "buy",
                "protocol": "pumpfun",
                "tokenMintAddress": "Mint",
                "inputAmount": 0.5,
                "outputAmount": "1000000",
                "priceImpact": 0.01,
            },
        )
        quote = await self.client.get_route_quote(QuoteAction.Buy, "Mint", 0.5)

        self.assertTrue(quote.is_buy)
        self.assertEqual(quote.output_amount_as_number, 1_000_000.0)
        self.assertEqual(quote.exchange_rate, 2_000_000.0)
        self.assertEqual(
            self.request_list[0][2],
            {"action": "buy", "tokenMintAddress": "Mint", "amount": 0.5, "rpcUrl": "https://rpc.example.com"},
        )

        await self.client.get_route_quote("buy", "Mint", 0.5, "https://other-rpc.example.com")
        self.assertEqual(self.request_list[1][2]["rpcUrl"], "https://other-rpc.example.com")

    async def test_route_quote_wrong_format(self):
        self._set_resp("/api/tokens/route", {"success": True, "action": "buy"})
        with self.assertRaises(HttpResponseFormatError):
            await self.client.get_route_quote("buy", "Mint", 0.5)

    async def test_utilities(self):
        self._set_resp("/health", {"status": "ok"})
        self._set_resp("/api/utilities/generate-mint", {"success": True, "mint": "MintAddr"})

        self.assertEqual(await self.client.health_check(), {"status": "ok"})
        self.assertEqual((await self.client.generate_mint())["mint"], "MintAddr")
        self.assertEqual([(method, path) for method, path, _ in self.request_list], [
            ("GET", "/health"),
            ("GET", "/api/utilities/generate-mint"),
        ])

        self._set_resp("/api/utilities/generate-mint", {"success": False, "error": "Out of mints"})
        with self.assertRaises(FuryRemoteError):
            await self.client.generate_mint()


if __name__ == "__main__":
    unittest.main()
