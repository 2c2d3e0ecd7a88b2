"""
Pydantic models for JSON-RPC envelopes and the Solana payloads we consume.

Mirrors Solana RPC field names through camelCase aliases. Models are lenient
about extra keys (the RPC adds fields across versions) but strict about the
type of the fields we read (Strict* types, no "100" -> 100 coercion): a
wrong-typed field fails validation and the caller turns that into a
DecodeError. Field absence and explicit null are kept apart through
model_fields_set where it matters (RpcResponse.result).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"
DEFAULT_REQUEST_ID = 1
LAMPORTS_PER_SOL = 1_000_000_000


class _SolanaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_json(self) -> dict[str, Any]:
        """Dump with RPC field names, leaving out fields the RPC never sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# -----------------------------------------------------------------------------
# JSON-RPC envelope
# -----------------------------------------------------------------------------


class RpcRequest(BaseModel):
    """One JSON-RPC 2.0 call. Constant id: requests are never pipelined."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: str = Field(default=JSONRPC_VERSION)
    id: int = Field(default=DEFAULT_REQUEST_ID)
    method: str = Field(..., min_length=1)
    params: list[Any] = Field(default_factory=list)


class RpcErrorObject(BaseModel):
    code: int
    message: str
    data: Any = None


class RpcResponse(BaseModel):
    """
    Decoded response envelope.

    result is opaque here; the operation that issued the call validates it
    into its own model. has_result tells "result": null apart from no
    result key at all.
    """

    model_config = ConfigDict(extra="allow")

    jsonrpc: str | None = None
    id: int | str | None = None
    result: Any = None
    error: RpcErrorObject | None = None

    @property
    def has_result(self) -> bool:
        return "result" in self.model_fields_set

    @property
    def has_error(self) -> bool:
        return "error" in self.model_fields_set and self.error is not None


# -----------------------------------------------------------------------------
# Accounts
# -----------------------------------------------------------------------------


class TokenAmount(_SolanaModel):
    amount: StrictStr | None = None
    decimals: StrictInt | None = None
    ui_amount: StrictFloat | None = Field(default=None, alias="uiAmount")
    ui_amount_string: StrictStr | None = Field(default=None, alias="uiAmountString")


class ParsedTokenInfo(_SolanaModel):
    mint: StrictStr | None = None
    owner: StrictStr | None = None
    state: str | None = None
    token_amount: TokenAmount | None = Field(default=None, alias="tokenAmount")


class ParsedAccountPayload(_SolanaModel):
    info: ParsedTokenInfo | None = None
    type: str | None = None


class ParsedAccountData(_SolanaModel):
    parsed: ParsedAccountPayload | None = None
    program: str | None = None
    space: int | None = None


class AccountInfo(_SolanaModel):
    # jsonParsed falls back to ["<base64>", "base64"] for data it cannot parse
    data: ParsedAccountData | list[Any] | str | None = None
    executable: bool | None = None
    lamports: StrictInt | None = None
    owner: StrictStr | None = None
    rent_epoch: Any = Field(default=None, alias="rentEpoch")  # u64::MAX for rent-exempt accounts


class TokenAccount(_SolanaModel):
    """One getProgramAccounts item: owning pubkey plus (parsed) account data."""

    pubkey: StrictStr
    account: AccountInfo = Field(default_factory=AccountInfo)

    @property
    def mint(self) -> str | None:
        info = _parsed_token_info(self.account)
        return info.mint if info else None

    @property
    def ui_amount(self) -> float | None:
        info = _parsed_token_info(self.account)
        if info is None or info.token_amount is None:
            return None
        amount = info.token_amount
        if amount.ui_amount is not None:
            return amount.ui_amount
        # uiAmount is deprecated upstream and may be null; uiAmountString is not
        if amount.ui_amount_string:
            try:
                return float(amount.ui_amount_string)
            except ValueError:
                return None
        return None


def _parsed_token_info(account: AccountInfo) -> ParsedTokenInfo | None:
    data = account.data
    if not isinstance(data, ParsedAccountData) or data.parsed is None:
        return None
    return data.parsed.info


class LargestTokenAccount(_SolanaModel):
    """getTokenLargestAccounts value item."""

    address: StrictStr
    amount: StrictStr | None = None
    decimals: StrictInt | None = None
    ui_amount: StrictFloat | None = Field(default=None, alias="uiAmount")
    ui_amount_string: StrictStr | None = Field(default=None, alias="uiAmountString")


class LargestAccount(_SolanaModel):
    """getLargestAccounts value item."""

    address: StrictStr
    lamports: StrictInt


# -----------------------------------------------------------------------------
# Signatures and transactions
# -----------------------------------------------------------------------------


class SignatureEntry(_SolanaModel):
    """getConfirmedSignaturesForAddress2 item. Upstream order is newest first."""

    signature: StrictStr
    slot: StrictInt | None = None
    err: Any = None
    memo: str | None = None
    block_time: StrictInt | None = Field(default=None, alias="blockTime")
    confirmation_status: str | None = Field(default=None, alias="confirmationStatus")


class ParsedInstruction(_SolanaModel):
    program: str | None = None
    program_id: str | None = Field(default=None, alias="programId")
    # dict for parsed programs, plain string for e.g. spl-memo
    parsed: dict[str, Any] | str | None = None
    accounts: list[str] | None = None
    data: str | None = None
    stack_height: int | None = Field(default=None, alias="stackHeight")


class TransactionMessage(_SolanaModel):
    account_keys: list[Any] = Field(default_factory=list, alias="accountKeys")
    instructions: list[ParsedInstruction] = Field(default_factory=list)
    recent_blockhash: str | None = Field(default=None, alias="recentBlockhash")


class TransactionBody(_SolanaModel):
    signatures: list[StrictStr] = Field(default_factory=list)
    message: TransactionMessage = Field(default_factory=TransactionMessage)


class Transfer(BaseModel):
    """A value movement pulled out of a parsed transfer instruction."""

    source: str
    destination: str
    amount: float
    program: str | None = None


class TransactionRecord(_SolanaModel):
    """getTransaction result with jsonParsed encoding."""

    slot: StrictInt | None = None
    block_time: StrictInt | None = Field(default=None, alias="blockTime")
    meta: dict[str, Any] | None = None
    transaction: TransactionBody = Field(default_factory=TransactionBody)
    version: int | str | None = None

    @property
    def signature(self) -> str | None:
        sigs = self.transaction.signatures
        return sigs[0] if sigs else None

    def transfers(self) -> list[Transfer]:
        """
        Top-level system/spl-token transfer instructions in message order.

        System transfers are converted from lamports to SOL; spl-token
        transferChecked uses uiAmount; plain spl-token transfer keeps the
        raw integer amount.
        """
        out: list[Transfer] = []
        for ix in self.transaction.message.instructions:
            parsed = ix.parsed
            if not isinstance(parsed, dict):
                continue
            kind = parsed.get("type")
            info = parsed.get("info") or {}
            if kind not in ("transfer", "transferChecked") or not isinstance(info, dict):
                continue
            source = info.get("source")
            destination = info.get("destination")
            if not source or not destination:
                continue
            amount = _transfer_amount(kind, info)
            if amount is None:
                continue
            out.append(
                Transfer(
                    source=source,
                    destination=destination,
                    amount=amount,
                    program=ix.program,
                )
            )
        return out


def _transfer_amount(kind: str, info: dict[str, Any]) -> float | None:
    if "lamports" in info:
        return int(info["lamports"]) / LAMPORTS_PER_SOL
    if kind == "transferChecked":
        ui = (info.get("tokenAmount") or {}).get("uiAmount")
        return float(ui) if ui is not None else None
    if "amount" in info:
        try:
            return float(info["amount"])
        except (TypeError, ValueError):
            return None
    return None
