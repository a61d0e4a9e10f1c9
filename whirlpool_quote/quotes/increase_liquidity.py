"""
Increase Liquidity Quote - 유동성 예치 quote

예치 흐름:
1. 입력 토큰 금액에서 transfer fee를 뺀 실제 풀 도달 금액으로 유동성 계산 (내림)
2. 유동성에서 필요한 토큰 추정치 계산 (올림)
3. 슬리피지 적용해 최대 지불 금액 계산
4. 추정치와 최대치에 transfer fee를 더해 사용자가 보낼 금액으로 변환

슬리피지 전략:
- AMOUNT: tick 기반 상태, 추정치에 (1 + t) 적용
- PRICE_BOUND: strict 상태, 가격을 (1 ± t) 이동시킨 세 지점의 토큰 수요 중 최대
"""

import logging
from typing import Optional, Union

from ..data.types import Percentage, PoolData, SlippageStrategy, TokenExtensionContext
from ..math.fixed_point import check_u64, check_u128
from ..math.position_math import get_strict_position_status
from ..math.slippage import adjust_for_slippage, get_slippage_bound_for_sqrt_price
from ..math.token_math import TokenAmounts, get_liquidity_from_input_token, get_token_amounts_from_liquidity
from ..math.transfer_fee import calculate_transfer_fee_excluded_amount, calculate_transfer_fee_included_amount
from .results import IncreaseLiquidityQuote, IncreaseLiquidityTransferFee
from .utils import (
    check_position_range,
    is_token_a,
    log_quote_errors,
    position_status_for,
    resolve_slippage,
    resolve_strategy,
)

logger = logging.getLogger(__name__)


@log_quote_errors("increase liquidity quote by input token")
def increase_liquidity_quote_by_input_token(
    input_token_mint: str,
    input_token_amount: int,
    tick_lower_index: int,
    tick_upper_index: int,
    pool: PoolData,
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    strategy: Optional[Union[SlippageStrategy, str]] = None
) -> IncreaseLiquidityQuote:
    """한쪽 토큰 예치 금액으로 유동성 예치 quote 계산

    현재 범위에 필요 없는 쪽 토큰이거나 금액이 0이면 0 quote를 반환합니다.

    Args:
        input_token_mint: 예치할 토큰 민트 (풀의 A 또는 B)
        input_token_amount: 보낼 금액 (transfer fee 포함)
        tick_lower_index: 포지션 하한 틱
        tick_upper_index: 포지션 상한 틱
        pool: 풀 상태
        token_extension_ctx: 민트별 transfer fee 정보
        slippage_tolerance: 슬리피지 허용치 (None이면 설정 기본값)
        strategy: 슬리피지 전략 (None이면 설정 기본값)

    Returns:
        IncreaseLiquidityQuote

    Raises:
        InvalidInputError: 민트가 풀에 없거나 틱 범위가 잘못되었거나 금액이 음수인 경우
        OutOfRangeError: 틱이 범위를 벗어난 경우
        AmountOverflowError: 입력 금액 또는 fee 포함 금액이 u64를 넘는 경우
    """
    check_position_range(tick_lower_index, tick_upper_index, pool.tick_spacing)
    input_is_a = is_token_a(input_token_mint, pool)
    check_u64(input_token_amount, "input token amount")
    strategy = resolve_strategy(strategy)
    slippage_tolerance = resolve_slippage(slippage_tolerance)

    if input_token_amount == 0:
        return IncreaseLiquidityQuote()

    transfer_fee = token_extension_ctx.transfer_fee_a if input_is_a else token_extension_ctx.transfer_fee_b
    fee_excluded = calculate_transfer_fee_excluded_amount(transfer_fee, input_token_amount)

    status = position_status_for(strategy, pool, tick_lower_index, tick_upper_index)
    liquidity = get_liquidity_from_input_token(
        fee_excluded.amount,
        input_is_a,
        pool.sqrt_price,
        tick_lower_index,
        tick_upper_index,
        status,
    )
    logger.debug(
        "increase by %s: status=%s strategy=%s amount=%d (after transfer fee %d) liquidity=%d",
        "A" if input_is_a else "B", status.value, strategy.value,
        input_token_amount, fee_excluded.amount, liquidity,
    )

    if liquidity == 0:
        return IncreaseLiquidityQuote()

    return _quote_by_liquidity(
        liquidity, tick_lower_index, tick_upper_index, pool, token_extension_ctx, slippage_tolerance, strategy
    )


@log_quote_errors("increase liquidity quote by liquidity")
def increase_liquidity_quote_by_liquidity(
    liquidity: int,
    tick_lower_index: int,
    tick_upper_index: int,
    pool: PoolData,
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    strategy: Optional[Union[SlippageStrategy, str]] = None
) -> IncreaseLiquidityQuote:
    """추가할 유동성으로 예치 quote 계산

    Args:
        liquidity: 추가할 유동성 (0이면 0 quote)
        tick_lower_index: 포지션 하한 틱
        tick_upper_index: 포지션 상한 틱
        pool: 풀 상태
        token_extension_ctx: 민트별 transfer fee 정보
        slippage_tolerance: 슬리피지 허용치 (None이면 설정 기본값)
        strategy: 슬리피지 전략 (None이면 설정 기본값)

    Returns:
        IncreaseLiquidityQuote
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


def _quote_by_liquidity(
    liquidity: int,
    tick_lower_index: int,
    tick_upper_index: int,
    pool: PoolData,
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Percentage,
    strategy: SlippageStrategy
) -> IncreaseLiquidityQuote:
    if liquidity == 0:
        return IncreaseLiquidityQuote()

    if strategy == SlippageStrategy.AMOUNT:
        status = position_status_for(strategy, pool, tick_lower_index, tick_upper_index)
        token_est = get_token_amounts_from_liquidity(
            liquidity, pool.sqrt_price, tick_lower_index, tick_upper_index, True, status
        )
        token_max = TokenAmounts(
            adjust_for_slippage(token_est.token_a, slippage_tolerance, True),
            adjust_for_slippage(token_est.token_b, slippage_tolerance, True),
        )
    else:
        token_est, token_max = _price_bound_token_amounts(
            liquidity, tick_lower_index, tick_upper_index, pool.sqrt_price, slippage_tolerance
        )

    logger.debug(
        "increase by liquidity %d: est=(%d, %d) max=(%d, %d) before transfer fee",
        liquidity, token_est.token_a, token_est.token_b, token_max.token_a, token_max.token_b,
    )

    fee_a = token_extension_ctx.transfer_fee_a
    fee_b = token_extension_ctx.transfer_fee_b
    est_a = calculate_transfer_fee_included_amount(fee_a, token_est.token_a)
    est_b = calculate_transfer_fee_included_amount(fee_b, token_est.token_b)
    max_a = calculate_transfer_fee_included_amount(fee_a, token_max.token_a)
    max_b = calculate_transfer_fee_included_amount(fee_b, token_max.token_b)

    return IncreaseLiquidityQuote(
        liquidity_amount=liquidity,
        token_est_a=est_a.amount,
        token_est_b=est_b.amount,
        token_max_a=max_a.amount,
        token_max_b=max_b.amount,
        transfer_fee=IncreaseLiquidityTransferFee(
            deducting_from_token_max_a=max_a.fee,
            deducting_from_token_max_b=max_b.fee,
            deducting_from_token_est_a=est_a.fee,
            deducting_from_token_est_b=est_b.fee,
        ),
    )


def _price_bound_token_amounts(
    liquidity: int,
    tick_lower_index: int,
    tick_upper_index: int,
    sqrt_price: int,
    slippage_tolerance: Percentage
):
    """가격 하한 / 현재 / 상한 세 지점에서 필요한 토큰 (올림), 토큰별 최대치

    Returns:
        (현재 가격 추정치, 세 지점 최대치)
    """
    bounds = get_slippage_bound_for_sqrt_price(sqrt_price, slippage_tolerance)

    quotes = []
    for price in (bounds.lower.sqrt_price, sqrt_price, bounds.upper.sqrt_price):
        status = get_strict_position_status(price, tick_lower_index, tick_upper_index)
        quotes.append(
            get_token_amounts_from_liquidity(liquidity, price, tick_lower_index, tick_upper_index, True, status)
        )

    token_max = TokenAmounts(
        max(q.token_a for q in quotes),
        max(q.token_b for q in quotes),
    )
    return quotes[1], token_max
