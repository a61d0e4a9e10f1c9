"""
Whirlpool Concentrated Liquidity Quote Engine

온체인 프로그램과 동일한 정수 정밀도로 Orca Whirlpool 집중화된 유동성의
가격 변환, 예치/출금/스왑 quote, 미수령 수수료/리워드를 계산하는 라이브러리.
모든 함수는 순수 계산이며 네트워크 I/O를 하지 않습니다.
"""

__version__ = "0.1.0"
__author__ = "Zekiya"

from .constants import Q64, MIN_TICK, MAX_TICK, MIN_SQRT_PRICE, MAX_SQRT_PRICE, TICK_ARRAY_SIZE
from .errors import (
    QuoteError,
    OutOfRangeError,
    InvalidInputError,
    AmountOverflowError,
    InsufficientTickArraysError,
)
from .data.types import (
    Percentage,
    SlippageStrategy,
    TransferFee,
    TransferFeeConfig,
    MintInfo,
    TokenExtensionContext,
    TickData,
    TickArrayData,
    PoolData,
    PositionData,
)
from .quotes import (
    increase_liquidity_quote_by_input_token,
    increase_liquidity_quote_by_liquidity,
    decrease_liquidity_quote_by_liquidity,
    decrease_liquidity_quote_by_token_amount,
    swap_quote_by_input_token,
    swap_quote_by_output_token,
    swap_quote_by_token_amount,
    collect_fees_quote,
    collect_rewards_quote,
)
