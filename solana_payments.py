import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Union

from solders.pubkey import Pubkey

from amounts import require_at_least, to_decimal, to_integer_amount
from ledger_client import LedgerClient, resolve_account
from solana_constants import SOL_DECIMALS, SYSTEM_PROGRAM_ID
from token_addresses import get_associated_token_address
from token_layouts import decode_token_account, validate_mint
from transfer_errors import CreateTransactionError, TransactionBuildError
from transfer_instructions import (
    TransferTransaction,
    add_references,
    assemble_transaction,
    build_checked_transfer,
    build_transfer,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    """Either a built transaction or the reason it couldn't be built, never both."""
    transaction: Optional[TransferTransaction] = None
    error: Optional[CreateTransactionError] = None

    @property
    def success(self):
        return self.error is None

    @classmethod
    def ok(cls, transaction):
        return cls(transaction=transaction)

    @classmethod
    def failure(cls, error):
        return cls(error=error)

    def unwrap(self) -> TransferTransaction:
        """Return the transaction, raising TransactionBuildError if the build failed."""
        if self.error is not None:
            raise TransactionBuildError(self.error)
        return self.transaction


def _build_sol_transfer(payer: Pubkey, payer_info, recipient: Pubkey, recipient_info, amount: Decimal):
    """Validate and build a native SOL transfer. Returns (instruction, error)."""
    if recipient_info.owner != SYSTEM_PROGRAM_ID:
        # Logged only, not rejected
        logger.warning(f"Recipient {recipient} is owned by program {recipient_info.owner}, not the system program")

    # Check that the amount provided doesn't have greater precision than SOL
    lamports, error = to_integer_amount(amount, SOL_DECIMALS)
    if error:
        return None, error

    # Check that the payer has enough lamports
    error = require_at_least(payer_info.lamports, lamports, CreateTransactionError.PAYER_INSUFFICIENT_FUNDS)
    if error:
        return None, error

    return build_transfer(payer, recipient, lamports), None


async def _build_token_transfer(client: LedgerClient, payer: Pubkey, recipient: Pubkey, token: Pubkey, amount: Decimal):
    """Validate and build an SPL token transfer between ATAs. Returns (instruction, error)."""
    # Check that the token provided is an initialized mint owned by the token program
    token_info, error = await resolve_account(client, token, CreateTransactionError.TOKEN_NOT_FOUND)
    if error:
        return None, error
    mint, error = validate_mint(token_info)
    if error:
        return None, error

    # Check that the amount provided doesn't have greater precision than the mint
    tokens, error = to_integer_amount(amount, mint.decimals)
    if error:
        return None, error

    # Get the payer's ATA and check that it exists
    payer_ata = get_associated_token_address(token, payer)
    payer_ata_info, error = await resolve_account(client, payer_ata, CreateTransactionError.PAYER_ATA_NOT_FOUND)
    if error:
        return None, error

    # Check that the payer's token balance is enough to transfer
    balance = decode_token_account(payer_ata_info.data).amount
    error = require_at_least(balance, tokens, CreateTransactionError.PAYER_ATA_INSUFFICIENT_FUNDS)
    if error:
        return None, error

    # Get the recipient's ATA and check that it exists
    recipient_ata = get_associated_token_address(token, recipient)
    _, error = await resolve_account(client, recipient_ata, CreateTransactionError.RECIPIENT_ATA_NOT_FOUND)
    if error:
        return None, error

    instruction = build_checked_transfer(payer_ata, token, recipient_ata, payer, tokens, mint.decimals)
    return instruction, None


async def create_transaction(client: LedgerClient, payer: Pubkey, recipient: Pubkey,
                             amount: Union[Decimal, int, str], token: Optional[Pubkey] = None,
                             references: Optional[Iterable[Pubkey]] = None,
                             memo: Optional[str] = None) -> TransferResult:
    """
    Build an unsigned transaction transferring SOL or SPL tokens from payer to recipient.

    Args:
        client: Ledger client used to fetch account state
        payer: The wallet paying and signing for the transfer
        recipient: The wallet receiving the funds
        amount: Decimal amount in SOL, or in tokens when a token mint is given
        token: The mint address of the SPL token, or None for native SOL
        references: Read-only accounts appended to the transfer instruction for indexing
        memo: Text for a memo instruction following the transfer

    Returns:
        TransferResult: the transaction, or the first failing check
    """
    amount = to_decimal(amount)
    references = list(references or [])

    payer_info, error = await resolve_account(client, payer, CreateTransactionError.PAYER_NOT_FOUND)
    if error:
        return TransferResult.failure(error)

    recipient_info, error = await resolve_account(client, recipient, CreateTransactionError.RECIPIENT_NOT_FOUND)
    if error:
        return TransferResult.failure(error)

    # If no SPL token mint is provided, transfer native SOL
    if token is None:
        instruction, error = _build_sol_transfer(payer, payer_info, recipient, recipient_info, amount)
    # Otherwise, transfer SPL tokens from payer's ATA to recipient's ATA
    else:
        instruction, error = await _build_token_transfer(client, payer, recipient, token, amount)
    if error:
        logger.warning(f"Transfer of {amount} from {payer} to {recipient} rejected: {error.value}")
        return TransferResult.failure(error)

    instruction = add_references(instruction, references)
    transaction = assemble_transaction(payer, instruction, memo)

    asset = "SOL" if token is None else f"of token {token}"
    logger.info(f"Created transaction for {amount} {asset} from {payer} to {recipient} with {len(transaction)} instructions")
    return TransferResult.ok(transaction)
