"""
Adapter: EVM chain (BNB Smart Chain).

Implements the ChainAdapter protocol over web3.py's AsyncWeb3.
Balances are read from the JSON-RPC node; transfers are signed locally
with the configured signer key and broadcast raw.

Sending real value is gated: unless live execution is enabled and a
signer key is configured, execute_transaction raises
ExecutionDisabledError before any RPC call.
"""

import asyncio
import logging
from decimal import Decimal, localcontext
from typing import Optional

from pydantic import SecretStr
from web3 import AsyncWeb3, Web3

from tradesense.domain.trading.entities import (
    ChainTag,
    TokenBalance,
    TransactionRequest,
)
from tradesense.domain.trading.errors import ExecutionDisabledError

logger = logging.getLogger(__name__)

NATIVE_DECIMALS = 18
NATIVE_TRANSFER_GAS = 21_000
# uint256 has 78 digits; the default 28-digit context would round balances.
UNIT_PRECISION = 100

# Minimal ERC-20 ABI: the reads used for balances plus transfer.
ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Scale a human amount to integer base units.

    Raises:
        ValueError: If the amount is finer than one base unit of the asset,
            so a dust amount is never broadcast as zero.
    """
    with localcontext() as ctx:
        ctx.prec = UNIT_PRECISION
        scaled = amount.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(
                f"amount {amount} has more than {decimals} decimal places"
            )
    return int(scaled)


def from_base_units(value: int, decimals: int) -> str:
    """Format integer base units as an exact plain decimal string."""
    with localcontext() as ctx:
        ctx.prec = UNIT_PRECISION
        scaled = Decimal(value).scaleb(-decimals)
    text = format(scaled, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


class EvmChainAdapter:
    """ChainAdapter for an EVM-compatible chain.

    Args:
        w3: Connected AsyncWeb3 instance, owned by the service container.
        live_execution_enabled: Allow broadcasting signed transactions.
        signer_private_key: Key of the hot wallet that pays for transfers.
        chain: Chain tag served by this adapter.
        native_symbol: Symbol of the chain's gas asset.
    """

    production_ready = True

    def __init__(
        self,
        w3: AsyncWeb3,
        live_execution_enabled: bool = False,
        signer_private_key: Optional[SecretStr] = None,
        chain: ChainTag = ChainTag.BSC,
        native_symbol: str = "BNB",
    ) -> None:
        self.chain = chain
        self._w3 = w3
        self._live_execution_enabled = live_execution_enabled
        self._signer_private_key = signer_private_key
        self._native_symbol = native_symbol

    @classmethod
    def from_rpc_url(cls, rpc_url: str, **kwargs) -> "EvmChainAdapter":
        """Build an adapter talking to the given HTTP JSON-RPC endpoint."""
        return cls(AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url)), **kwargs)

    @property
    def execution_enabled(self) -> bool:
        return self._live_execution_enabled and self._signer_private_key is not None

    def is_valid_address(self, address: str) -> bool:
        return Web3.is_address(address)

    async def get_balance(
        self, address: str, token_address: Optional[str] = None
    ) -> TokenBalance:
        """Return the native balance, or an ERC-20 balance when a contract is given."""
        owner = Web3.to_checksum_address(address)

        if token_address is None:
            wei = await self._w3.eth.get_balance(owner)
            return TokenBalance(
                symbol=self._native_symbol,
                balance=from_base_units(wei, NATIVE_DECIMALS),
                decimals=NATIVE_DECIMALS,
                is_native=True,
            )

        contract = self._w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=ERC20_ABI
        )
        raw, decimals, symbol = await asyncio.gather(
            contract.functions.balanceOf(owner).call(),
            contract.functions.decimals().call(),
            contract.functions.symbol().call(),
        )
        return TokenBalance(
            symbol=symbol,
            balance=from_base_units(raw, decimals),
            decimals=decimals,
            is_native=False,
            token_address=token_address,
        )

    async def execute_transaction(self, request: TransactionRequest) -> str:
        """Sign and broadcast a transfer to ``request.recipient_address``.

        Returns:
            The transaction hash as a 0x-prefixed hex string.

        Raises:
            ExecutionDisabledError: If live execution is not configured.
        """
        if not self.execution_enabled:
            raise ExecutionDisabledError(self.chain.value)

        account = self._w3.eth.account.from_key(
            self._signer_private_key.get_secret_value()
        )
        recipient = Web3.to_checksum_address(request.recipient_address)
        nonce, gas_price, chain_id = await asyncio.gather(
            self._w3.eth.get_transaction_count(account.address),
            self._w3.eth.gas_price,
            self._w3.eth.chain_id,
        )
        base_tx = {
            "from": account.address,
            "nonce": nonce,
            "gasPrice": gas_price,
            "chainId": chain_id,
        }

        if request.token_address is None:
            tx = {
                **base_tx,
                "to": recipient,
                "value": to_base_units(request.amount, NATIVE_DECIMALS),
                "gas": NATIVE_TRANSFER_GAS,
            }
        else:
            contract = self._w3.eth.contract(
                address=Web3.to_checksum_address(request.token_address),
                abi=ERC20_ABI,
            )
            decimals = await contract.functions.decimals().call()
            tx = await contract.functions.transfer(
                recipient, to_base_units(request.amount, decimals)
            ).build_transaction(base_tx)

        signed = account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_reference = Web3.to_hex(tx_hash)
        logger.info(
            "Broadcast %s transfer of %s to %s: %s",
            self.chain.value,
            request.amount,
            recipient,
            tx_reference,
        )
        return tx_reference

    async def aclose(self) -> None:
        await self._w3.provider.disconnect()
