import base64
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import aiohttp
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.hash import Hash
from solders.pubkey import Pubkey

from solana_constants import SOLANA_COMMITMENT, SOLANA_RPC_TIMEOUT, SOLANA_URL
from transfer_errors import CreateTransactionError, LedgerClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountInfo:
    """Point-in-time snapshot of an on-chain account."""
    owner: Pubkey
    data: bytes
    lamports: int


class LedgerClient(Protocol):
    async def get_account_info(self, address: Pubkey) -> Optional[AccountInfo]:
        ...


async def resolve_account(client: LedgerClient, address: Pubkey,
                          not_found: CreateTransactionError) -> Tuple[Optional[AccountInfo], Optional[CreateTransactionError]]:
    """
    Fetch an account, reporting the given error if it doesn't exist.

    Returns:
        tuple: (account_info, error)
    """
    account_info = await client.get_account_info(address)
    if account_info is None:
        logger.warning(f"Account {address} does not exist on chain ({not_found.value})")
        return None, not_found
    logger.debug(f"Found account {address} owned by {account_info.owner} with {account_info.lamports} lamports")
    return account_info, None


class SolanaLedgerClient:
    """Ledger client backed by solana-py's AsyncClient."""

    def __init__(self, url=SOLANA_URL, commitment=SOLANA_COMMITMENT, timeout=SOLANA_RPC_TIMEOUT):
        self.url = url
        self.client = AsyncClient(url, commitment=Commitment(commitment), timeout=timeout)

    async def get_account_info(self, address: Pubkey) -> Optional[AccountInfo]:
        response = await self.client.get_account_info(address)
        account = response.value
        if account is None:
            return None
        return AccountInfo(owner=account.owner, data=bytes(account.data), lamports=account.lamports)

    async def get_latest_blockhash(self):
        response = await self.client.get_latest_blockhash()
        return response.value.blockhash

    async def close(self):
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


class JsonRpcLedgerClient:
    """Ledger client making direct JSON-RPC requests to the Solana node."""

    def __init__(self, url=SOLANA_URL, commitment=SOLANA_COMMITMENT, timeout=SOLANA_RPC_TIMEOUT, session=None):
        self.url = url
        self.commitment = commitment
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self):
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def make_rpc_request(self, method, params=None):
        """Make a single JSON-RPC request to the Solana node."""
        if params is None:
            params = []

        headers = {"Content-Type": "application/json"}
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params
        }

        logger.debug(f"Making RPC request: {method} with params: {params}")

        session = await self._get_session()
        async with session.post(self.url, headers=headers, json=payload) as response:
            if response.status != 200:
                text = await response.text()
                raise LedgerClientError(f"RPC request {method} failed with status {response.status}: {text}")
            result = await response.json()

        if 'error' in result:
            raise LedgerClientError(f"RPC error in {method}: {result['error']}")
        logger.debug(f"RPC response received for {method}")
        return result['result']

    async def get_account_info(self, address: Pubkey) -> Optional[AccountInfo]:
        params = [str(address), {"encoding": "base64", "commitment": self.commitment}]
        result = await self.make_rpc_request("getAccountInfo", params)

        # If value is null, account doesn't exist
        value = result.get('value')
        if value is None:
            return None

        data, encoding = value['data']
        if encoding != 'base64':
            raise LedgerClientError(f"Unexpected account data encoding: {encoding}")
        return AccountInfo(
            owner=Pubkey.from_string(value['owner']),
            data=base64.b64decode(data),
            lamports=int(value['lamports']),
        )

    async def get_latest_blockhash(self):
        result = await self.make_rpc_request("getLatestBlockhash", [{"commitment": self.commitment}])
        return Hash.from_string(result['value']['blockhash'])

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
