"""
Account queries: token holdings of a wallet, program account scans, and the
largest-account listings.

A wallet without holdings is a normal outcome and resolves to None; only
transport and RPC failures raise RetrievalFailure.
"""

from __future__ import annotations

from typing import Any

from solana_snapshot.config.env import SolanaConfig
from solana_snapshot.core.exceptions import RpcError
from solana_snapshot.rpc.decode import context_value, decode_list, retrieval
from solana_snapshot.rpc.models import LargestAccount, LargestTokenAccount, TokenAccount
from solana_snapshot.rpc.transport import RpcTransport
from solana_snapshot.snapshot_logging import get_logger

logger = get_logger(__name__)

# SPL token account layout: 165 bytes, owner pubkey at offset 32, mint at 0
TOKEN_ACCOUNT_SIZE = 165
TOKEN_ACCOUNT_OWNER_OFFSET = 32
TOKEN_ACCOUNT_MINT_OFFSET = 0

LARGEST_ACCOUNTS_COMMITMENT = "confirmed"


def holdings_filters(wallet: str) -> list[dict[str, Any]]:
    return [
        {"dataSize": TOKEN_ACCOUNT_SIZE},
        {"memcmp": {"offset": TOKEN_ACCOUNT_OWNER_OFFSET, "bytes": wallet}},
    ]


def mint_filters(mint: str) -> list[dict[str, Any]]:
    return [{"memcmp": {"offset": TOKEN_ACCOUNT_MINT_OFFSET, "bytes": mint}}]


class AccountQuery:
    """getProgramAccounts / getTokenLargestAccounts / getLargestAccounts."""

    def __init__(self, transport: RpcTransport, config: SolanaConfig) -> None:
        self._transport = transport
        self._config = config

    def get_token_holdings(self, wallet: str, mint: str | None = None) -> TokenAccount | None:
        """
        Return the wallet's token account for `mint` (or its first token account).

        Scans the SPL token program for 165-byte accounts owned by `wallet`.
        A response without a result field is logged at debug level and
        treated as "no holdings".
        """
        params = [
            self._config.spl_token_program_id,
            {"encoding": "jsonParsed", "filters": holdings_filters(wallet)},
        ]
        with retrieval("Failed to retrieve token holdings", wallet=wallet):
            response = self._transport.send_raw("getProgramAccounts", params)
            if response.has_error:
                err = response.error
                logger.error(
                    "rpc_error",
                    method="getProgramAccounts",
                    code=err.code,
                    error_message=err.message,
                )
                raise RpcError(err.code, err.message)
            if not response.has_result:
                logger.debug(
                    "token_holdings_invalid_format",
                    wallet=wallet,
                    params=params,
                    response=response.model_dump(exclude_unset=True),
                )
                return None
            accounts = decode_list(TokenAccount, response.result)

        if mint is None:
            return accounts[0] if accounts else None
        for account in accounts:
            if account.mint == mint:
                return account
        return None

    def get_program_accounts(
        self,
        program_id: str,
        filters: list[dict[str, Any]],
    ) -> list[TokenAccount]:
        """Accounts owned by `program_id` matching `filters`, in upstream order."""
        params = [program_id, {"encoding": "jsonParsed", "filters": filters}]
        with retrieval("Failed to retrieve program accounts", program_id=program_id):
            response = self._transport.send("getProgramAccounts", params)
            return decode_list(TokenAccount, response.result)

    def get_largest_token_accounts(
        self,
        mint: str,
        commitment: str | None = None,
    ) -> list[LargestTokenAccount]:
        """Largest holders of an SPL token mint (result.value, or [])."""
        params: list[Any] = [mint]
        if commitment is not None:
            params.append({"commitment": commitment})
        with retrieval("Failed to retrieve largest token accounts", mint=mint):
            response = self._transport.send("getTokenLargestAccounts", params)
            return decode_list(LargestTokenAccount, context_value(response.result))

    def get_largest_accounts(self, filter: str | None = None) -> list[LargestAccount]:
        """
        Largest accounts by lamport balance (result.value, or []).

        filter is "circulating" or "nonCirculating"; without it the call
        carries no parameters at all.
        """
        params: list[Any] = []
        if filter is not None:
            params = [{"commitment": LARGEST_ACCOUNTS_COMMITMENT, "filter": filter}]
        with retrieval("Failed to retrieve largest Solana accounts", filter=filter):
            response = self._transport.send("getLargestAccounts", params)
            return decode_list(LargestAccount, context_value(response.result))
