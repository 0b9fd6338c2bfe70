import os
import logging
from dotenv import load_dotenv
from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

SOLANA_NETWORK = os.getenv('SOLANA_NETWORK', 'devnet')  # 'devnet', 'testnet', or 'mainnet-beta'
SOLANA_COMMITMENT = os.getenv('SOLANA_COMMITMENT', 'confirmed')
try:
    SOLANA_RPC_TIMEOUT = float(os.getenv('SOLANA_RPC_TIMEOUT', '10'))  # Seconds
except ValueError:
    logger.warning("Invalid SOLANA_RPC_TIMEOUT format, using default value of 10 seconds")
    SOLANA_RPC_TIMEOUT = 10.0

# Configure Solana RPC endpoint
if SOLANA_NETWORK == 'mainnet-beta':
    SOLANA_URL = 'https://api.mainnet-beta.solana.com'
elif SOLANA_NETWORK == 'testnet':
    SOLANA_URL = 'https://api.testnet.solana.com'
else:
    SOLANA_URL = 'https://api.devnet.solana.com'
SOLANA_URL = os.getenv('SOLANA_RPC_URL', SOLANA_URL)

# Program IDs - fixed values across all Solana networks
SYSTEM_PROGRAM_ID = Pubkey.from_string('11111111111111111111111111111111')
MEMO_PROGRAM_ID = Pubkey.from_string('MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr')

# Native SOL has 9 decimals (1 SOL = 1 billion lamports)
SOL_DECIMALS = 9
LAMPORTS_PER_SOL = 10 ** SOL_DECIMALS

# SPL token record sizes in bytes
MINT_RECORD_SIZE = 82
TOKEN_ACCOUNT_RECORD_SIZE = 165

# Token amounts and lamports are u64 on chain
U64_MAX = 2 ** 64 - 1
