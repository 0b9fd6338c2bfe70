from functools import lru_cache

from solders.pubkey import Pubkey

from solana_constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID


@lru_cache(maxsize=1024)
def get_associated_token_address(mint: Pubkey, owner: Pubkey) -> Pubkey:
    """
    Derive the associated token account address.

    ATAs are deterministically derived from the owner and mint addresses.
    """
    seeds = [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)]
    ata, _ = Pubkey.find_program_address(seeds, ASSOCIATED_TOKEN_PROGRAM_ID)
    return ata
