from enum import Enum


class CreateTransactionError(str, Enum):
    """Reasons a transfer transaction can't be built from the fetched account state."""
    PAYER_NOT_FOUND = 'PAYER_NOT_FOUND'
    RECIPIENT_NOT_FOUND = 'RECIPIENT_NOT_FOUND'
    TOKEN_NOT_FOUND = 'TOKEN_NOT_FOUND'
    TOKEN_INVALID_PROGRAM = 'TOKEN_INVALID_PROGRAM'
    TOKEN_INVALID_LENGTH = 'TOKEN_INVALID_LENGTH'
    TOKEN_MINT_NOT_INITIALIZED = 'TOKEN_MINT_NOT_INITIALIZED'
    AMOUNT_INVALID_DECIMALS = 'AMOUNT_INVALID_DECIMALS'
    PAYER_ATA_NOT_FOUND = 'PAYER_ATA_NOT_FOUND'
    RECIPIENT_ATA_NOT_FOUND = 'RECIPIENT_ATA_NOT_FOUND'
    PAYER_INSUFFICIENT_FUNDS = 'PAYER_INSUFFICIENT_FUNDS'
    PAYER_ATA_INSUFFICIENT_FUNDS = 'PAYER_ATA_INSUFFICIENT_FUNDS'


class TransactionBuildError(Exception):
    """Raised by TransferResult.unwrap() when the build failed."""

    def __init__(self, error: CreateTransactionError):
        super().__init__(error.value)
        self.error = error


class AccountDecodeError(ValueError):
    """Account data is too short for the record it should hold."""


class LedgerClientError(Exception):
    """The RPC node answered with an error instead of account data."""
