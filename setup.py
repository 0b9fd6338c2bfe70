from setuptools import setup

setup(
    name="solana-transfer-builder",
    version="0.1.0",
    py_modules=[
        "amounts",
        "ledger_client",
        "solana_constants",
        "solana_payments",
        "token_addresses",
        "token_layouts",
        "transfer_cli",
        "transfer_errors",
        "transfer_instructions",
    ],
    python_requires=">=3.9",
    install_requires=[
        "aiohttp>=3.9.3",
        "python-dotenv>=1.0.1",
        "solders>=0.21.0",
        "solana>=0.34.0",  # Provides solana.rpc and the spl.token helpers
        "base58>=2.1.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "solana-transfer=transfer_cli:cli",
        ],
    },
)
