import asyncio
import base64
from types import SimpleNamespace

import pytest
from aiohttp import web
from aiohttp import test_utils
from solders.account import Account

from conftest import FakeLedgerClient, new_pubkey
from ledger_client import AccountInfo, JsonRpcLedgerClient, SolanaLedgerClient, resolve_account
from solana_constants import SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID
from transfer_errors import CreateTransactionError, LedgerClientError


def run(coro):
    return asyncio.run(coro)


async def _rpc_call(reply, address, status=200):
    """Serve one canned JSON-RPC reply and fetch the account through JsonRpcLedgerClient."""
    requests = []

    async def handler(request):
        requests.append(await request.json())
        return web.json_response(reply, status=status)

    app = web.Application()
    app.router.add_post('/', handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        async with JsonRpcLedgerClient(str(server.make_url('/')), commitment='finalized') as client:
            account_info = await client.get_account_info(address)
    finally:
        await server.close()
    return account_info, requests


def test_resolve_account_found():
    address = new_pubkey()
    info = AccountInfo(owner=SYSTEM_PROGRAM_ID, data=b'', lamports=5)
    ledger = FakeLedgerClient({address: info})
    assert run(resolve_account(ledger, address, CreateTransactionError.PAYER_NOT_FOUND)) == (info, None)


def test_resolve_account_missing_reports_call_site_error():
    ledger = FakeLedgerClient()
    address = new_pubkey()
    result = run(resolve_account(ledger, address, CreateTransactionError.RECIPIENT_ATA_NOT_FOUND))
    assert result == (None, CreateTransactionError.RECIPIENT_ATA_NOT_FOUND)
    assert ledger.lookups == [address]


def test_json_rpc_client_decodes_base64_account():
    address = new_pubkey()
    reply = {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {
            "context": {"slot": 1},
            "value": {
                "data": [base64.b64encode(b'\x01\x02\x03').decode('ascii'), "base64"],
                "executable": False,
                "lamports": 2039280,
                "owner": str(TOKEN_PROGRAM_ID),
                "rentEpoch": 0,
            },
        },
    }
    account_info, requests = run(_rpc_call(reply, address))

    assert account_info == AccountInfo(owner=TOKEN_PROGRAM_ID, data=b'\x01\x02\x03', lamports=2039280)
    assert requests[0]['method'] == 'getAccountInfo'
    assert requests[0]['params'] == [str(address), {"encoding": "base64", "commitment": "finalized"}]


def test_json_rpc_client_missing_account():
    reply = {"jsonrpc": "2.0", "id": 1, "result": {"context": {"slot": 1}, "value": None}}
    account_info, _ = run(_rpc_call(reply, new_pubkey()))
    assert account_info is None


def test_json_rpc_client_raises_on_rpc_error():
    reply = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid param"}}
    with pytest.raises(LedgerClientError):
        run(_rpc_call(reply, new_pubkey()))


def test_json_rpc_client_raises_on_http_error():
    with pytest.raises(LedgerClientError):
        run(_rpc_call({"error": "unavailable"}, new_pubkey(), status=503))


def test_solana_client_maps_account():
    address = new_pubkey()
    account = Account(lamports=10, data=b'\x07' * 82, owner=TOKEN_PROGRAM_ID)
    calls = []

    class StubAsyncClient:
        async def get_account_info(self, pubkey):
            calls.append(pubkey)
            return SimpleNamespace(value=account if pubkey == address else None)

        async def close(self):
            calls.append('closed')

    async def fetch():
        async with SolanaLedgerClient('http://localhost:8899') as client:
            client.client = StubAsyncClient()
            return await client.get_account_info(address), await client.get_account_info(new_pubkey())

    found, missing = run(fetch())
    assert found == AccountInfo(owner=TOKEN_PROGRAM_ID, data=b'\x07' * 82, lamports=10)
    assert missing is None
    assert calls[-1] == 'closed'
