"""
Quote Request/Response Schemas using Pydantic

Validates JSON-style quote requests coming from outside the library and
serialises quote results. u64/u128 amounts may arrive as strings and are
always returned as strings (they exceed JavaScript's safe integer range).
"""
from pydantic import BaseModel, Field, model_validator
from typing import Any, Dict, List, Optional, Union

from .constants import MAX_FEE_BASIS_POINTS, MAX_SQRT_PRICE, MAX_TICK, MIN_SQRT_PRICE, MIN_TICK, U64_MAX, U128_MAX
from .data.types import (
    MintInfo,
    Percentage,
    PoolData,
    SlippageStrategy,
    TickArrayData,
    TickData,
    TokenExtensionContext,
    TransferFeeConfig,
)
from .quotes import (
    decrease_liquidity_quote_by_liquidity,
    decrease_liquidity_quote_by_token_amount,
    increase_liquidity_quote_by_input_token,
    increase_liquidity_quote_by_liquidity,
    swap_quote_by_token_amount,
)


class TransferFeeModel(BaseModel):
    """Token-2022 transfer fee of a mint (current epoch)"""
    fee_bps: int = Field(..., description="Transfer fee in basis points", ge=0, le=MAX_FEE_BASIS_POINTS)
    max_fee: int = Field(..., description="Maximum fee per transfer", ge=0, le=U64_MAX)


class MintModel(BaseModel):
    """Token mint with optional transfer fee extension"""
    address: str = Field(..., description="Mint address")
    decimals: int = Field(default=0, description="Token decimals", ge=0, le=255)
    transfer_fee: Optional[TransferFeeModel] = Field(default=None, description="Transfer fee extension")

    def to_mint_info(self) -> MintInfo:
        config = None
        if self.transfer_fee is not None:
            config = TransferFeeConfig.single(self.transfer_fee.fee_bps, self.transfer_fee.max_fee)
        return MintInfo(address=self.address, decimals=self.decimals, transfer_fee_config=config)


class PoolModel(BaseModel):
    """Whirlpool state supplied by the account fetcher"""
    tick_current_index: int = Field(..., description="Current tick index", ge=MIN_TICK, le=MAX_TICK)
    sqrt_price: int = Field(..., description="Current sqrt price (Q64.64)", ge=MIN_SQRT_PRICE, le=MAX_SQRT_PRICE)
    tick_spacing: int = Field(..., description="Tick spacing", gt=0, le=65535)
    fee_rate: int = Field(..., description="Fee rate in hundredths of a basis point", ge=0, lt=1_000_000)
    protocol_fee_rate: int = Field(default=0, description="Protocol fee rate in basis points", ge=0, le=10_000)
    liquidity: int = Field(default=0, description="Active liquidity", ge=0, le=U128_MAX)
    fee_growth_global_a: int = Field(default=0, ge=0, le=U128_MAX)
    fee_growth_global_b: int = Field(default=0, ge=0, le=U128_MAX)
    mint_a: MintModel = Field(..., description="Token A mint")
    mint_b: MintModel = Field(..., description="Token B mint")
    current_epoch: int = Field(default=0, description="Current epoch (transfer fee schedule)", ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "tick_current_index": -28863,
                "sqrt_price": "4344090764091891007",
                "tick_spacing": 64,
                "fee_rate": 3000,
                "protocol_fee_rate": 300,
                "liquidity": "151234567890",
                "mint_a": {"address": "So11111111111111111111111111111111111111112", "decimals": 9},
                "mint_b": {"address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", "decimals": 6},
            }
        }

    def to_pool_data(self) -> PoolData:
        return PoolData(
            tick_current_index=self.tick_current_index,
            sqrt_price=self.sqrt_price,
            tick_spacing=self.tick_spacing,
            fee_rate=self.fee_rate,
            token_mint_a=self.mint_a.address,
            token_mint_b=self.mint_b.address,
            liquidity=self.liquidity,
            protocol_fee_rate=self.protocol_fee_rate,
            fee_growth_global_a=self.fee_growth_global_a,
            fee_growth_global_b=self.fee_growth_global_b,
        )

    def to_token_extension_context(self) -> TokenExtensionContext:
        return TokenExtensionContext(
            mint_a=self.mint_a.to_mint_info(),
            mint_b=self.mint_b.to_mint_info(),
            current_epoch=self.current_epoch,
        )


class TickModel(BaseModel):
    """Initialized tick inside a tick array"""
    liquidity_net: int = Field(..., description="Liquidity change when crossing left to right")
    liquidity_gross: int = Field(default=0, ge=0, le=U128_MAX)


class TickArrayModel(BaseModel):
    """Tick array given sparsely: only initialized ticks are listed"""
    start_tick_index: int = Field(..., description="First tick of the array")
    ticks: Dict[int, TickModel] = Field(default_factory=dict, description="Initialized ticks by tick index")

    def to_tick_array(self, tick_spacing: int) -> TickArrayData:
        ticks = {
            index: TickData(initialized=True, liquidity_net=tick.liquidity_net, liquidity_gross=tick.liquidity_gross)
            for index, tick in self.ticks.items()
        }
        return TickArrayData.with_ticks(self.start_tick_index, tick_spacing, ticks)


class SlippageModel(BaseModel):
    """Slippage settings; omitted fields fall back to configured defaults"""
    slippage_bps: Optional[int] = Field(default=None, description="Slippage tolerance in bps", ge=0, le=10_000)
    strategy: Optional[SlippageStrategy] = Field(default=None, description="amount or price_bound")

    def percentage(self) -> Optional[Percentage]:
        if self.slippage_bps is None:
            return None
        return Percentage.from_bps(self.slippage_bps)


class IncreaseLiquidityRequest(SlippageModel):
    """Deposit quote request: either an input token amount or a liquidity amount"""
    pool: PoolModel
    tick_lower_index: int = Field(..., ge=MIN_TICK, le=MAX_TICK)
    tick_upper_index: int = Field(..., ge=MIN_TICK, le=MAX_TICK)
    input_token_mint: Optional[str] = Field(default=None, description="Mint of the deposited token")
    input_token_amount: Optional[int] = Field(default=None, ge=0, le=U64_MAX)
    liquidity: Optional[int] = Field(default=None, ge=0, le=U128_MAX)

    @model_validator(mode="after")
    def check_amount_or_liquidity(self):
        by_token = self.input_token_mint is not None and self.input_token_amount is not None
        if by_token == (self.liquidity is not None):
            raise ValueError("provide either input_token_mint and input_token_amount, or liquidity")
        return self


class DecreaseLiquidityRequest(SlippageModel):
    """Withdraw quote request: either a liquidity amount or a desired token amount"""
    pool: PoolModel
    tick_lower_index: int = Field(..., ge=MIN_TICK, le=MAX_TICK)
    tick_upper_index: int = Field(..., ge=MIN_TICK, le=MAX_TICK)
    liquidity: Optional[int] = Field(default=None, ge=0, le=U128_MAX)
    token_mint: Optional[str] = Field(default=None, description="Mint of the desired token")
    token_amount: Optional[int] = Field(default=None, ge=0, le=U64_MAX)

    @model_validator(mode="after")
    def check_liquidity_or_amount(self):
        by_token = self.token_mint is not None and self.token_amount is not None
        if by_token == (self.liquidity is not None):
            raise ValueError("provide either liquidity, or token_mint and token_amount")
        return self


class SwapQuoteRequest(SlippageModel):
    """Swap quote request"""
    pool: PoolModel
    token_mint: str = Field(..., description="Mint of the specified amount")
    token_amount: int = Field(..., ge=0, le=U64_MAX)
    amount_specified_is_input: bool = Field(default=True)
    tick_arrays: List[Optional[TickArrayModel]] = Field(..., description="Tick arrays in swap direction", max_length=3)
    sqrt_price_limit: Optional[int] = Field(default=None, ge=MIN_SQRT_PRICE, le=MAX_SQRT_PRICE)
    other_amount_threshold: Optional[int] = Field(default=None, ge=0, le=U64_MAX)


QuoteRequest = Union[IncreaseLiquidityRequest, DecreaseLiquidityRequest, SwapQuoteRequest]


class QuoteResponse(BaseModel):
    """Quote response; integer amounts are strings"""
    status: str = Field(default="success", description="Response status")
    quote: Dict[str, Any] = Field(..., description="Quote fields (camelCase)")


def _stringify(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        return {key: _stringify(v) for key, v in value.items()}
    if isinstance(value, list):
        return [_stringify(v) for v in value]
    return value


def quote_request(request: QuoteRequest) -> QuoteResponse:
    """Dispatch a validated request to the matching quote function"""
    pool = request.pool.to_pool_data()
    ctx = request.pool.to_token_extension_context()
    slippage = request.percentage()

    if isinstance(request, IncreaseLiquidityRequest):
        if request.liquidity is not None:
            quote = increase_liquidity_quote_by_liquidity(
                request.liquidity, request.tick_lower_index, request.tick_upper_index,
                pool, ctx, slippage, request.strategy,
            )
        else:
            quote = increase_liquidity_quote_by_input_token(
                request.input_token_mint, request.input_token_amount,
                request.tick_lower_index, request.tick_upper_index,
                pool, ctx, slippage, request.strategy,
            )
    elif isinstance(request, DecreaseLiquidityRequest):
        if request.liquidity is not None:
            quote = decrease_liquidity_quote_by_liquidity(
                request.liquidity, request.tick_lower_index, request.tick_upper_index,
                pool, ctx, slippage, request.strategy,
            )
        else:
            quote = decrease_liquidity_quote_by_token_amount(
                request.token_mint, request.token_amount,
                request.tick_lower_index, request.tick_upper_index,
                pool, ctx, slippage, request.strategy,
            )
    elif isinstance(request, SwapQuoteRequest):
        tick_arrays = [
            tick_array.to_tick_array(pool.tick_spacing) if tick_array is not None else None
            for tick_array in request.tick_arrays
        ]
        quote = swap_quote_by_token_amount(
            request.token_mint, request.token_amount, request.amount_specified_is_input,
            pool, tick_arrays, ctx, slippage, request.sqrt_price_limit, request.other_amount_threshold,
        )
    else:
        raise TypeError(f"unsupported quote request: {type(request).__name__}")

    return QuoteResponse(quote=_stringify(quote.to_dict()))
