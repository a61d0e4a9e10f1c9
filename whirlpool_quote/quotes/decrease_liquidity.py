"""
Decrease Liquidity Quote - 유동성 출금 quote

출금 흐름:
1. 유동성에서 받을 토큰 추정치 계산 (내림)
2. 슬리피지 적용해 최소 수령 금액 계산
3. 추정치와 최소치에서 transfer fee를 빼 실제 수령액으로 변환

출금할 유동성이 포지션 유동성 이하인지는 호출자가 검증합니다.
"""

import logging
from typing import Optional, Union

from ..data.types import Percentage, PoolData, SlippageStrategy, TokenExtensionContext
from ..math.fixed_point import check_u64, check_u128
from ..math.position_math import get_strict_position_status
from ..math.slippage import adjust_for_slippage, get_slippage_bound_for_sqrt_price
from ..math.token_math import TokenAmounts, get_liquidity_from_input_token, get_token_amounts_from_liquidity
from ..math.transfer_fee import calculate_transfer_fee_excluded_amount, calculate_transfer_fee_included_amount
from .results import DecreaseLiquidityQuote, DecreaseLiquidityTransferFee
from .utils import (
    check_position_range,
    is_token_a,
    log_quote_errors,
    position_status_for,
    resolve_slippage,
    resolve_strategy,
)

logger = logging.getLogger(__name__)


@log_quote_errors("decrease liquidity quote by liquidity")
def decrease_liquidity_quote_by_liquidity(
    liquidity: int,
    tick_lower_index: int,
    tick_upper_index: int,
    pool: PoolData,
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    strategy: Optional[Union[SlippageStrategy, str]] = None
) -> DecreaseLiquidityQuote:
    """출금할 유동성으로 출금 quote 계산

    Args:
        liquidity: 출금할 유동성 (0이면 0 quote)
        tick_lower_index: 포지션 하한 틱
        tick_upper_index: 포지션 상한 틱
        pool: 풀 상태
        token_extension_ctx: 민트별 transfer fee 정보
        slippage_tolerance: 슬리피지 허용치 (None이면 설정 기본값)
        strategy: 슬리피지 전략 (None이면 설정 기본값)

    Returns:
        DecreaseLiquidityQuote
    """
    check_position_range(tick_lower_index, tick_upper_index, pool.tick_spacing)
    check_u128(liquidity, "liquidity")
    return _quote_by_liquidity(
        liquidity,
        tick_lower_index,
        tick_upper_index,
        pool,
        token_extension_ctx,
        resolve_slippage(slippage_tolerance),
        resolve_strategy(strategy),
    )


@log_quote_errors("decrease liquidity quote by token amount")
def decrease_liquidity_quote_by_token_amount(
    token_mint: str,
    token_amount: int,
    tick_lower_index: int,
    tick_upper_index: int,
    pool: PoolData,
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    strategy: Optional[Union[SlippageStrategy, str]] = None
) -> DecreaseLiquidityQuote:
    """받고 싶은 한쪽 토큰 금액으로 출금 quote 계산

    받을 금액(transfer fee 제외)을 풀에서 나가는 금액으로 되돌린 뒤 그 쪽 토큰 기준으로
    유동성을 구합니다. 범위에 그 토큰이 없으면 0 quote.
    """
    check_position_range(tick_lower_index, tick_upper_index, pool.tick_spacing)
    token_is_a = is_token_a(token_mint, pool)
    check_u64(token_amount, "token amount")
    strategy = resolve_strategy(strategy)
    slippage_tolerance = resolve_slippage(slippage_tolerance)

    if token_amount == 0:
        return DecreaseLiquidityQuote()

    transfer_fee = token_extension_ctx.transfer_fee_a if token_is_a else token_extension_ctx.transfer_fee_b
    fee_included = calculate_transfer_fee_included_amount(transfer_fee, token_amount)

    status = get_strict_position_status(pool.sqrt_price, tick_lower_index, tick_upper_index)
    liquidity = get_liquidity_from_input_token(
        fee_included.amount,
        token_is_a,
        pool.sqrt_price,
        tick_lower_index,
        tick_upper_index,
        status,
    )
    logger.debug(
        "decrease by %s: status=%s amount=%d (before transfer fee %d) liquidity=%d",
        "A" if token_is_a else "B", status.value, token_amount, fee_included.amount, liquidity,
    )

    return _quote_by_liquidity(
        liquidity, tick_lower_index, tick_upper_index, pool, token_extension_ctx, slippage_tolerance, strategy
    )


def _quote_by_liquidity(
    liquidity: int,
    tick_lower_index: int,
    tick_upper_index: int,
    pool: PoolData,
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Percentage,
    strategy: SlippageStrategy
) -> DecreaseLiquidityQuote:
    if liquidity == 0:
        return DecreaseLiquidityQuote()

    if strategy == SlippageStrategy.AMOUNT:
        status = position_status_for(strategy, pool, tick_lower_index, tick_upper_index)
        token_est = get_token_amounts_from_liquidity(
            liquidity, pool.sqrt_price, tick_lower_index, tick_upper_index, False, status
        )
        token_min = TokenAmounts(
            adjust_for_slippage(token_est.token_a, slippage_tolerance, False),
            adjust_for_slippage(token_est.token_b, slippage_tolerance, False),
        )
    else:
        bounds = get_slippage_bound_for_sqrt_price(pool.sqrt_price, slippage_tolerance)
        quotes = []
        for price in (bounds.lower.sqrt_price, pool.sqrt_price, bounds.upper.sqrt_price):
            status = get_strict_position_status(price, tick_lower_index, tick_upper_index)
            quotes.append(
                get_token_amounts_from_liquidity(liquidity, price, tick_lower_index, tick_upper_index, False, status)
            )
        token_est = quotes[1]
        token_min = TokenAmounts(
            min(q.token_a for q in quotes),
            min(q.token_b for q in quotes),
        )

    logger.debug(
        "decrease by liquidity %d: strategy=%s est=(%d, %d) min=(%d, %d) before transfer fee",
        liquidity, strategy.value, token_est.token_a, token_est.token_b, token_min.token_a, token_min.token_b,
    )

    fee_a = token_extension_ctx.transfer_fee_a
    fee_b = token_extension_ctx.transfer_fee_b
    est_a = calculate_transfer_fee_excluded_amount(fee_a, token_est.token_a)
    est_b = calculate_transfer_fee_excluded_amount(fee_b, token_est.token_b)
    min_a = calculate_transfer_fee_excluded_amount(fee_a, token_min.token_a)
    min_b = calculate_transfer_fee_excluded_amount(fee_b, token_min.token_b)

    return DecreaseLiquidityQuote(
        liquidity_amount=liquidity,
        token_est_a=est_a.amount,
        token_est_b=est_b.amount,
        token_min_a=min_a.amount,
        token_min_b=min_b.amount,
        transfer_fee=DecreaseLiquidityTransferFee(
            deducted_from_token_min_a=min_a.fee,
            deducted_from_token_min_b=min_b.fee,
            deducted_from_token_est_a=est_a.fee,
            deducted_from_token_est_b=est_b.fee,
        ),
    )
