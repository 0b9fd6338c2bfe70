import logging
from typing import Iterable, Optional, Sequence, Tuple

from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction
from spl.token.instructions import transfer_checked
from spl.token.models import TransferCheckedParams

from solana_constants import MEMO_PROGRAM_ID, TOKEN_PROGRAM_ID

logger = logging.getLogger(__name__)


class TransferTransaction:
    """Ordered, unsigned list of instructions paid for by the payer."""

    def __init__(self, fee_payer: Pubkey, instructions: Sequence[Instruction]):
        self.fee_payer = fee_payer
        self.instructions: Tuple[Instruction, ...] = tuple(instructions)

    def to_message(self, recent_blockhash: Optional[Hash] = None) -> Message:
        """Compile the instructions into a legacy message."""
        if recent_blockhash is None:
            recent_blockhash = Hash.default()
        return Message.new_with_blockhash(list(self.instructions), self.fee_payer, recent_blockhash)

    def to_unsigned(self, recent_blockhash: Optional[Hash] = None) -> Transaction:
        """Create an unsigned transaction ready to be signed by the payer."""
        return Transaction.new_unsigned(self.to_message(recent_blockhash))

    def __len__(self):
        return len(self.instructions)

    def __repr__(self):
        return f"TransferTransaction(fee_payer={self.fee_payer}, instructions={len(self.instructions)})"


def build_transfer(from_pubkey: Pubkey, to_pubkey: Pubkey, lamports: int) -> Instruction:
    """Create a system program instruction moving native SOL."""
    logger.info(f"Creating SOL transfer instruction for {lamports} lamports from {from_pubkey} to {to_pubkey}")
    return transfer(TransferParams(from_pubkey=from_pubkey, to_pubkey=to_pubkey, lamports=lamports))


def build_checked_transfer(source: Pubkey, mint: Pubkey, destination: Pubkey, owner: Pubkey,
                           amount: int, decimals: int) -> Instruction:
    """
    Create a token TransferChecked instruction.

    The token program rejects the instruction at execution time unless the
    mint and its decimals match the ones given here.
    """
    logger.info(f"Creating token transfer instruction for {amount} raw units ({decimals} decimals) of mint {mint}")
    return transfer_checked(
        TransferCheckedParams(
            program_id=TOKEN_PROGRAM_ID,
            source=source,
            mint=mint,
            dest=destination,
            owner=owner,
            amount=amount,
            decimals=decimals,
        )
    )


def add_references(instruction: Instruction, references: Optional[Iterable[Pubkey]]) -> Instruction:
    """Return the instruction with each reference appended as a read-only, non-signer account."""
    references = list(references or [])
    if not references:
        return instruction

    accounts = list(instruction.accounts)
    accounts.extend(AccountMeta(pubkey=reference, is_signer=False, is_writable=False) for reference in references)
    logger.debug(f"Added {len(references)} reference accounts to instruction")
    return Instruction(program_id=instruction.program_id, data=bytes(instruction.data), accounts=accounts)


def build_memo(memo: str) -> Instruction:
    return Instruction(program_id=MEMO_PROGRAM_ID, data=memo.encode('utf-8'), accounts=[])


def assemble_transaction(fee_payer: Pubkey, instruction: Instruction, memo: Optional[str] = None) -> TransferTransaction:
    """Create the transaction: the transfer instruction, then the memo if one is given."""
    instructions = [instruction]

    # An empty memo still gets its own instruction
    if memo is not None:
        instructions.append(build_memo(memo))

    return TransferTransaction(fee_payer, instructions)
