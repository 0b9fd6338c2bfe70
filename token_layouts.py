"""
SPL token record layouts.

Mint and token account records are fixed-size little-endian structures owned by
the token program. Each field is described by (name, offset, width) so the
decoders below read exactly the bytes the token program writes.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from solders.pubkey import Pubkey

from ledger_client import AccountInfo
from solana_constants import MINT_RECORD_SIZE, TOKEN_ACCOUNT_RECORD_SIZE, TOKEN_PROGRAM_ID
from transfer_errors import AccountDecodeError, CreateTransactionError

logger = logging.getLogger(__name__)

# Mint record (82 bytes)
MINT_LAYOUT = {
    'mint_authority_option': (0, 4),
    'mint_authority': (4, 32),
    'supply': (36, 8),
    'decimals': (44, 1),
    'is_initialized': (45, 1),
    'freeze_authority_option': (46, 4),
    'freeze_authority': (50, 32),
}

# Token account record (165 bytes), only the fields read here
TOKEN_ACCOUNT_LAYOUT = {
    'mint': (0, 32),
    'owner': (32, 32),
    'amount': (64, 8),
    'state': (108, 1),
}


class AccountState(IntEnum):
    UNINITIALIZED = 0
    INITIALIZED = 1
    FROZEN = 2


@dataclass(frozen=True)
class Mint:
    decimals: int
    is_initialized: bool
    supply: int
    mint_authority: Optional[Pubkey] = None
    freeze_authority: Optional[Pubkey] = None


@dataclass(frozen=True)
class TokenAccount:
    mint: Pubkey
    owner: Pubkey
    amount: int
    state: AccountState


def _field(data: bytes, layout: dict, name: str) -> bytes:
    offset, width = layout[name]
    return data[offset:offset + width]


def _read_int(data: bytes, layout: dict, name: str) -> int:
    return int.from_bytes(_field(data, layout, name), 'little')


def _read_optional_pubkey(data: bytes, layout: dict, name: str) -> Optional[Pubkey]:
    if _read_int(data, layout, f'{name}_option') == 0:
        return None
    return Pubkey.from_bytes(_field(data, layout, name))


def decode_mint(data: bytes) -> Mint:
    """Decode raw mint account bytes."""
    if len(data) < MINT_RECORD_SIZE:
        raise AccountDecodeError(f"Mint data is {len(data)} bytes, expected {MINT_RECORD_SIZE}")
    return Mint(
        decimals=_read_int(data, MINT_LAYOUT, 'decimals'),
        is_initialized=_read_int(data, MINT_LAYOUT, 'is_initialized') != 0,
        supply=_read_int(data, MINT_LAYOUT, 'supply'),
        mint_authority=_read_optional_pubkey(data, MINT_LAYOUT, 'mint_authority'),
        freeze_authority=_read_optional_pubkey(data, MINT_LAYOUT, 'freeze_authority'),
    )


def decode_token_account(data: bytes) -> TokenAccount:
    """Decode raw token account bytes."""
    if len(data) < TOKEN_ACCOUNT_RECORD_SIZE:
        raise AccountDecodeError(f"Token account data is {len(data)} bytes, expected {TOKEN_ACCOUNT_RECORD_SIZE}")
    try:
        state = AccountState(_read_int(data, TOKEN_ACCOUNT_LAYOUT, 'state'))
    except ValueError as e:
        raise AccountDecodeError(f"Invalid token account state: {e}") from e
    return TokenAccount(
        mint=Pubkey.from_bytes(_field(data, TOKEN_ACCOUNT_LAYOUT, 'mint')),
        owner=Pubkey.from_bytes(_field(data, TOKEN_ACCOUNT_LAYOUT, 'owner')),
        amount=_read_int(data, TOKEN_ACCOUNT_LAYOUT, 'amount'),
        state=state,
    )


def validate_mint(account_info: AccountInfo) -> Tuple[Optional[Mint], Optional[CreateTransactionError]]:
    """
    Check that an account is an initialized mint owned by the token program.

    Returns:
        tuple: (mint, error)
    """
    if account_info.owner != TOKEN_PROGRAM_ID:
        logger.warning(f"Token account is owned by {account_info.owner}, not the token program")
        return None, CreateTransactionError.TOKEN_INVALID_PROGRAM

    if len(account_info.data) != MINT_RECORD_SIZE:
        logger.warning(f"Token account data is {len(account_info.data)} bytes, not a mint record")
        return None, CreateTransactionError.TOKEN_INVALID_LENGTH

    mint = decode_mint(account_info.data)
    if not mint.is_initialized:
        logger.warning("Token mint is not initialized")
        return None, CreateTransactionError.TOKEN_MINT_NOT_INITIALIZED

    return mint, None
