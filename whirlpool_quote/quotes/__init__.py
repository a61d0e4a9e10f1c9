"""
Quote layer

- increase_liquidity: 유동성 예치 quote (입력 토큰 / 유동성 기준)
- decrease_liquidity: 유동성 출금 quote (유동성 / 토큰 금액 기준)
- swap_quote: 스왑 quote (입력 / 출력 수량 기준)
- collect_quote: 미수령 수수료 / 리워드
"""

from .results import (
    IncreaseLiquidityQuote,
    IncreaseLiquidityTransferFee,
    DecreaseLiquidityQuote,
    DecreaseLiquidityTransferFee,
    SwapQuote,
    SwapTransferFee,
    CollectFeesQuote,
    CollectRewardQuote,
    CollectRewardsQuote,
)
from .increase_liquidity import (
    increase_liquidity_quote_by_input_token,
    increase_liquidity_quote_by_liquidity,
)
from .decrease_liquidity import (
    decrease_liquidity_quote_by_liquidity,
    decrease_liquidity_quote_by_token_amount,
)
from .swap_quote import (
    swap_quote_by_input_token,
    swap_quote_by_output_token,
    swap_quote_by_token_amount,
)
from .tick_array_sequence import TickArraySequence
from .collect_quote import collect_fees_quote, collect_rewards_quote
