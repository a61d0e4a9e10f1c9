"""
Swap Quote - 입력 또는 출력 수량 지정 스왑 quote

방향 결정:
    a_to_b = (지정 민트 == token A) == (입력 지정 여부)

Transfer fee 처리:
- 입력 지정: 보낼 금액에서 입력 토큰 fee를 뺀 금액으로 시뮬레이션,
  출력 추정치는 출력 토큰 fee를 뺀 실제 수령액
- 출력 지정: 받을 금액에 출력 토큰 fee를 더한 금액으로 시뮬레이션,
  입력 추정치는 입력 토큰 fee를 더한 금액

시뮬레이션 후 수량 비율 슬리피지로 other_amount_threshold를 만듭니다.
"""

import logging
from typing import Optional, Sequence

from ..constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE, U64_MAX
from ..data.types import Percentage, PoolData, TickArrayData, TokenExtensionContext
from ..errors import InvalidInputError, OutOfRangeError
from ..math.fixed_point import check_u64
from ..math.slippage import adjust_for_slippage
from ..math.transfer_fee import (
    TransferFeeAmount,
    calculate_transfer_fee_excluded_amount,
    calculate_transfer_fee_included_amount,
)
from .results import SwapQuote, SwapTransferFee
from .swap_manager import compute_swap
from .tick_array_sequence import TickArraySequence
from .utils import is_token_a, log_quote_errors, resolve_slippage

logger = logging.getLogger(__name__)


def get_default_sqrt_price_limit(a_to_b: bool) -> int:
    """스왑 방향의 절대 가격 한도"""
    return MIN_SQRT_PRICE if a_to_b else MAX_SQRT_PRICE


def get_default_other_amount_threshold(amount_specified_is_input: bool) -> int:
    """슬리피지 적용 전 기본 한도 (입력 지정: 최소 수령 0, 출력 지정: 최대 지불 U64_MAX)"""
    return 0 if amount_specified_is_input else U64_MAX


def _check_sqrt_price_limit(sqrt_price_limit: int, sqrt_price: int, a_to_b: bool) -> None:
    if sqrt_price_limit < MIN_SQRT_PRICE or sqrt_price_limit > MAX_SQRT_PRICE:
        raise OutOfRangeError(
            f"sqrt price limit out of range: {sqrt_price_limit} (range: {MIN_SQRT_PRICE} ~ {MAX_SQRT_PRICE})"
        )
    if a_to_b and sqrt_price_limit >= sqrt_price:
        raise InvalidInputError(
            f"sqrt price limit {sqrt_price_limit} must be below current sqrt price {sqrt_price} for an a->b swap"
        )
    if not a_to_b and sqrt_price_limit <= sqrt_price:
        raise InvalidInputError(
            f"sqrt price limit {sqrt_price_limit} must be above current sqrt price {sqrt_price} for a b->a swap"
        )


@log_quote_errors("swap quote by input token")
def swap_quote_by_input_token(
    input_token_mint: str,
    token_amount: int,
    pool: PoolData,
    tick_arrays: Sequence[Optional[TickArrayData]],
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    sqrt_price_limit: Optional[int] = None
) -> SwapQuote:
    """보낼 입력 금액으로 스왑 quote 계산"""
    a_to_b = is_token_a(input_token_mint, pool)
    return _swap_quote(
        pool, tick_arrays, token_amount, a_to_b, True, sqrt_price_limit, None,
        token_extension_ctx, resolve_slippage(slippage_tolerance),
    )


@log_quote_errors("swap quote by output token")
def swap_quote_by_output_token(
    output_token_mint: str,
    token_amount: int,
    pool: PoolData,
    tick_arrays: Sequence[Optional[TickArrayData]],
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    sqrt_price_limit: Optional[int] = None
) -> SwapQuote:
    """받을 출력 금액으로 스왑 quote 계산"""
    a_to_b = not is_token_a(output_token_mint, pool)
    return _swap_quote(
        pool, tick_arrays, token_amount, a_to_b, False, sqrt_price_limit, None,
        token_extension_ctx, resolve_slippage(slippage_tolerance),
    )


@log_quote_errors("swap quote by token amount")
def swap_quote_by_token_amount(
    token_mint: str,
    token_amount: int,
    amount_specified_is_input: bool,
    pool: PoolData,
    tick_arrays: Sequence[Optional[TickArrayData]],
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Optional[Percentage] = None,
    sqrt_price_limit: Optional[int] = None,
    other_amount_threshold: Optional[int] = None
) -> SwapQuote:
    """지정 민트와 수량으로 스왑 quote 계산

    Args:
        token_mint: 지정 수량의 민트 (풀의 A 또는 B)
        token_amount: 지정 수량 (입력이면 보낼 금액, 출력이면 받을 금액)
        amount_specified_is_input: 지정 수량이 입력이면 True
        pool: 풀 상태
        tick_arrays: 스왑 방향 순서의 틱 배열 (최대 3개, 없는 배열은 None)
        token_extension_ctx: 민트별 transfer fee 정보
        slippage_tolerance: 슬리피지 허용치 (None이면 설정 기본값)
        sqrt_price_limit: 가격 한도 (None이면 방향의 절대 한도)
        other_amount_threshold: 시뮬레이션 결과가 지켜야 할 반대쪽 한도
            (None이면 입력 지정 0, 출력 지정 U64_MAX)

    Returns:
        SwapQuote

    Raises:
        InvalidInputError: 민트 불일치, 가격 한도 방향 오류, 한도 위반
        OutOfRangeError: 가격 한도가 범위를 벗어난 경우
        InsufficientTickArraysError: 틱 배열이 부족한 경우 (더 많은 배열로 재시도)
        AmountOverflowError: 계산 수량이 u64를 넘는 경우
    """
    a_to_b = is_token_a(token_mint, pool) == amount_specified_is_input
    return _swap_quote(
        pool, tick_arrays, token_amount, a_to_b, amount_specified_is_input, sqrt_price_limit,
        other_amount_threshold, token_extension_ctx, resolve_slippage(slippage_tolerance),
    )


def _zero_quote(
    pool: PoolData,
    token_amount: int,
    a_to_b: bool,
    amount_specified_is_input: bool,
    sqrt_price_limit: int
) -> SwapQuote:
    return SwapQuote(
        amount=token_amount,
        other_amount_threshold=0,
        sqrt_price_limit=sqrt_price_limit,
        amount_specified_is_input=amount_specified_is_input,
        a_to_b=a_to_b,
        estimated_amount_in=0,
        estimated_amount_out=0,
        estimated_end_tick_index=pool.tick_current_index,
        estimated_end_sqrt_price=pool.sqrt_price,
        estimated_fee_amount=0,
        estimated_fee_growth_global_input=pool.fee_growth_global_a if a_to_b else pool.fee_growth_global_b,
    )


def _swap_quote(
    pool: PoolData,
    tick_arrays: Sequence[Optional[TickArrayData]],
    token_amount: int,
    a_to_b: bool,
    amount_specified_is_input: bool,
    sqrt_price_limit: Optional[int],
    other_amount_threshold: Optional[int],
    token_extension_ctx: TokenExtensionContext,
    slippage_tolerance: Percentage
) -> SwapQuote:
    check_u64(token_amount, "token amount")
    if sqrt_price_limit is None:
        sqrt_price_limit = get_default_sqrt_price_limit(a_to_b)
    if other_amount_threshold is None:
        other_amount_threshold = get_default_other_amount_threshold(amount_specified_is_input)
    _check_sqrt_price_limit(sqrt_price_limit, pool.sqrt_price, a_to_b)

    if a_to_b:
        fee_in, fee_out = token_extension_ctx.transfer_fee_a, token_extension_ctx.transfer_fee_b
    else:
        fee_in, fee_out = token_extension_ctx.transfer_fee_b, token_extension_ctx.transfer_fee_a

    if amount_specified_is_input:
        specified = calculate_transfer_fee_excluded_amount(fee_in, token_amount)
    else:
        specified = calculate_transfer_fee_included_amount(fee_out, token_amount)

    if specified.amount == 0:
        return _zero_quote(pool, token_amount, a_to_b, amount_specified_is_input, sqrt_price_limit)

    tick_sequence = TickArraySequence(tick_arrays, pool.tick_spacing, a_to_b)
    tick_sequence.check_tick_array_0(pool.tick_current_index)

    logger.debug(
        "swap a_to_b=%s input=%s amount=%d (simulated %d) limit=%d",
        a_to_b, amount_specified_is_input, token_amount, specified.amount, sqrt_price_limit,
    )
    result = compute_swap(
        pool, tick_sequence, specified.amount, sqrt_price_limit, amount_specified_is_input, a_to_b
    )

    if a_to_b:
        raw_amount_in, raw_amount_out = result.amount_a, result.amount_b
    else:
        raw_amount_in, raw_amount_out = result.amount_b, result.amount_a

    if amount_specified_is_input:
        amount_out = calculate_transfer_fee_excluded_amount(fee_out, raw_amount_out)
        if amount_out.amount < other_amount_threshold:
            raise InvalidInputError(
                f"amount out {amount_out.amount} is below other amount threshold {other_amount_threshold} "
                f"(slippage exceeded)"
            )
        if raw_amount_in == specified.amount:
            # 입력을 다 썼으면 사용자가 보낸 금액 그대로
            amount_in = TransferFeeAmount(token_amount, token_amount - specified.amount)
        else:
            amount_in = calculate_transfer_fee_included_amount(fee_in, raw_amount_in)
        threshold = adjust_for_slippage(amount_out.amount, slippage_tolerance, False)
    else:
        amount_in = calculate_transfer_fee_included_amount(fee_in, raw_amount_in)
        if amount_in.amount > other_amount_threshold:
            raise InvalidInputError(
                f"amount in {amount_in.amount} exceeds other amount threshold {other_amount_threshold} "
                f"(slippage exceeded)"
            )
        amount_out = calculate_transfer_fee_excluded_amount(fee_out, raw_amount_out)
        threshold = check_u64(
            adjust_for_slippage(amount_in.amount, slippage_tolerance, True), "other amount threshold"
        )

    logger.debug(
        "swap quote: in=%d out=%d fee=%d end_tick=%d threshold=%d",
        amount_in.amount, amount_out.amount, result.total_fee_amount, result.next_tick_index, threshold,
    )

    return SwapQuote(
        amount=token_amount,
        other_amount_threshold=threshold,
        sqrt_price_limit=sqrt_price_limit,
        amount_specified_is_input=amount_specified_is_input,
        a_to_b=a_to_b,
        estimated_amount_in=amount_in.amount,
        estimated_amount_out=amount_out.amount,
        estimated_end_tick_index=result.next_tick_index,
        estimated_end_sqrt_price=result.next_sqrt_price,
        estimated_fee_amount=result.total_fee_amount,
        estimated_protocol_fee_amount=result.protocol_fee_amount,
        estimated_fee_growth_global_input=result.next_fee_growth_global_input,
        tick_array_start_indexes=tick_sequence.touched_start_tick_indexes(),
        transfer_fee=SwapTransferFee(
            deducting_from_estimated_amount_in=amount_in.fee,
            deducted_from_estimated_amount_out=amount_out.fee,
        ),
    )
