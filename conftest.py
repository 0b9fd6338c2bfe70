import logging

import pytest
from solders.keypair import Keypair

from ledger_client import AccountInfo
from solana_constants import SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID
from token_addresses import get_associated_token_address

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


class FakeLedgerClient:
    """In-memory ledger that records the order of account lookups."""

    def __init__(self, accounts=None):
        self.accounts = dict(accounts or {})
        self.lookups = []

    async def get_account_info(self, address):
        self.lookups.append(address)
        return self.accounts.get(address)


def new_pubkey():
    return Keypair().pubkey()


def build_mint_data(decimals, is_initialized=True, supply=0):
    """Raw 82 byte mint record without authorities."""
    return (
        bytes(4) + bytes(32)
        + supply.to_bytes(8, 'little')
        + bytes([decimals, 1 if is_initialized else 0])
        + bytes(4) + bytes(32)
    )


def build_token_account_data(mint, owner, amount, state=1):
    """Raw 165 byte token account record."""
    return (
        bytes(mint) + bytes(owner)
        + amount.to_bytes(8, 'little')
        + bytes(36)
        + bytes([state])
        + bytes(56)
    )


@pytest.fixture
def wallets():
    payer = new_pubkey()
    recipient = new_pubkey()
    ledger = FakeLedgerClient({
        payer: AccountInfo(owner=SYSTEM_PROGRAM_ID, data=b'', lamports=2 * 10 ** 9),
        recipient: AccountInfo(owner=SYSTEM_PROGRAM_ID, data=b'', lamports=0),
    })
    return ledger, payer, recipient


@pytest.fixture
def token_wallets(wallets):
    """Ledger holding a 6 decimal mint, a payer ATA with 10 tokens and an empty recipient ATA."""
    ledger, payer, recipient = wallets
    mint = new_pubkey()
    payer_ata = get_associated_token_address(mint, payer)
    recipient_ata = get_associated_token_address(mint, recipient)
    ledger.accounts[mint] = AccountInfo(owner=TOKEN_PROGRAM_ID, data=build_mint_data(6, supply=10 ** 12), lamports=1461600)
    ledger.accounts[payer_ata] = AccountInfo(
        owner=TOKEN_PROGRAM_ID, data=build_token_account_data(mint, payer, 10_000_000), lamports=2039280)
    ledger.accounts[recipient_ata] = AccountInfo(
        owner=TOKEN_PROGRAM_ID, data=build_token_account_data(mint, recipient, 0), lamports=2039280)
    return ledger, payer, recipient, mint
