import argparse
import asyncio
import base64
import logging
import sys
from decimal import Decimal, InvalidOperation

from base58 import b58encode
from solders.hash import Hash
from solders.pubkey import Pubkey

from amounts import to_decimal
from ledger_client import JsonRpcLedgerClient, SolanaLedgerClient
from solana_constants import SOLANA_URL
from solana_payments import create_transaction

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def pubkey_arg(value):
    try:
        return Pubkey.from_string(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid public key: {value!r}")


def amount_arg(value):
    try:
        return to_decimal(Decimal(value))
    except (InvalidOperation, ValueError):
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}")


def blockhash_arg(value):
    try:
        return Hash.from_string(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid blockhash: {value!r}")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Build an unsigned SOL or SPL token transfer transaction")
    ap.add_argument("payer", type=pubkey_arg, help="Payer wallet public key")
    ap.add_argument("recipient", type=pubkey_arg, help="Recipient wallet public key")
    ap.add_argument("amount", type=amount_arg, help="Decimal amount in SOL, or in tokens with --token")
    ap.add_argument("--token", type=pubkey_arg, help="SPL token mint address")
    ap.add_argument("--reference", type=pubkey_arg, action="append", default=[], help="Reference public key (repeatable)")
    ap.add_argument("--memo", help="Memo text added after the transfer")
    ap.add_argument("--rpc-url", default=SOLANA_URL, help="Solana RPC URL")
    ap.add_argument("--json-rpc", action="store_true", help="Query the node with direct JSON-RPC requests instead of solana-py")
    ap.add_argument("--blockhash", type=blockhash_arg, help="Recent blockhash to use instead of fetching the latest one")
    return ap.parse_args(argv)


def describe_transaction(transaction):
    """Return printable lines for each instruction of a transaction."""
    lines = []
    for index, instruction in enumerate(transaction.instructions):
        lines.append(f"Instruction {index}: program {instruction.program_id}")
        for meta in instruction.accounts:
            flags = ("w" if meta.is_writable else "-") + ("s" if meta.is_signer else "-")
            lines.append(f"  {flags} {meta.pubkey}")
        lines.append(f"  data: {b58encode(bytes(instruction.data)).decode('ascii')}")
    return lines


async def main(argv=None):
    args = parse_args(argv)
    client_class = JsonRpcLedgerClient if args.json_rpc else SolanaLedgerClient

    async with client_class(args.rpc_url) as client:
        result = await create_transaction(client, args.payer, args.recipient, args.amount,
                                          token=args.token, references=args.reference, memo=args.memo)
        if not result.success:
            print(f"Error: {result.error.value}")
            return 1

        if args.blockhash is not None:
            blockhash = args.blockhash
        else:
            blockhash = await client.get_latest_blockhash()
            logger.info(f"Got blockhash: {blockhash}")

    for line in describe_transaction(result.transaction):
        print(line)
    unsigned = result.transaction.to_unsigned(blockhash)
    print(f"Unsigned transaction (base64): {base64.b64encode(bytes(unsigned)).decode('ascii')}")
    return 0


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
