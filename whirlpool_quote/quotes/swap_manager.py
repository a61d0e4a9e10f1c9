"""
Swap Manager - 유동성 곡선을 따라 스왑 시뮬레이션

한 스텝마다:
1. 스왑 방향으로 다음 초기화된 틱 탐색
2. 목표 가격 = 다음 틱 가격과 가격 한도 중 가까운 쪽
3. compute_swap_step으로 입력/출력/수수료 계산
4. 목표가 틱 가격이었다면 틱을 건너며 liquidity_net 반영
지정 수량이 소진되거나 가격 한도에 닿으면 멈춥니다.
"""

import logging
from typing import NamedTuple

from ..constants import U64_MAX
from ..data.types import PoolData
from ..errors import AmountOverflowError
from ..math.fee_math import calculate_protocol_fee, next_fee_growth_global
from ..math.swap_math import compute_swap_step
from ..math.tick_math import sqrt_price_to_tick_index, tick_index_to_sqrt_price
from .tick_array_sequence import TickArraySequence

logger = logging.getLogger(__name__)


class SwapResult(NamedTuple):
    """시뮬레이션 결과 (transfer fee 적용 전)"""
    amount_a: int
    amount_b: int
    next_tick_index: int
    next_sqrt_price: int
    total_fee_amount: int
    protocol_fee_amount: int
    next_fee_growth_global_input: int


def compute_swap(
    pool: PoolData,
    tick_sequence: TickArraySequence,
    token_amount: int,
    sqrt_price_limit: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> SwapResult:
    """풀 상태에서 스왑을 시뮬레이션

    Args:
        pool: 풀 상태
        tick_sequence: 스왑 방향 틱 배열 시퀀스
        token_amount: 지정 수량 (입력이면 수수료 포함)
        sqrt_price_limit: 가격 한도
        amount_specified_is_input: 지정 수량이 입력이면 True
        a_to_b: 스왑 방향

    Returns:
        SwapResult

    Raises:
        InsufficientTickArraysError: 시퀀스 밖의 틱 배열이 필요한 경우
        AmountOverflowError: 누적 계산 수량이 u64를 넘는 경우
    """
    amount_remaining = token_amount
    amount_calculated = 0
    curr_sqrt_price = pool.sqrt_price
    curr_liquidity = pool.liquidity
    curr_tick_index = pool.tick_current_index
    total_fee_amount = 0
    protocol_fee_amount = 0
    fee_growth_global_input = pool.fee_growth_global_a if a_to_b else pool.fee_growth_global_b

    while amount_remaining > 0 and curr_sqrt_price != sqrt_price_limit:
        next_tick_index, _ = tick_sequence.find_next_initialized_tick_index(curr_tick_index)

        next_tick_price = tick_index_to_sqrt_price(next_tick_index)
        if a_to_b:
            target_sqrt_price = max(sqrt_price_limit, next_tick_price)
        else:
            target_sqrt_price = min(sqrt_price_limit, next_tick_price)

        step = compute_swap_step(
            amount_remaining,
            pool.fee_rate,
            curr_liquidity,
            curr_sqrt_price,
            target_sqrt_price,
            amount_specified_is_input,
            a_to_b,
        )
        logger.debug(
            "swap step: tick=%d liquidity=%d in=%d out=%d fee=%d next_sqrt_price=%d",
            curr_tick_index, curr_liquidity, step.amount_in, step.amount_out, step.fee_amount,
            step.next_sqrt_price,
        )

        total_fee_amount += step.fee_amount

        if amount_specified_is_input:
            amount_remaining -= step.amount_in + step.fee_amount
            amount_calculated += step.amount_out
        else:
            amount_remaining -= step.amount_out
            amount_calculated += step.amount_in + step.fee_amount

        if amount_calculated > U64_MAX:
            raise AmountOverflowError(f"swap calculated amount exceeds u64 max: {amount_calculated}")

        step_protocol_fee = calculate_protocol_fee(step.fee_amount, pool.protocol_fee_rate)
        protocol_fee_amount += step_protocol_fee
        fee_growth_global_input = next_fee_growth_global(
            fee_growth_global_input, step.fee_amount - step_protocol_fee, curr_liquidity
        )

        if step.next_sqrt_price == next_tick_price:
            next_tick = tick_sequence.get_tick(next_tick_index)
            if next_tick.initialized:
                if a_to_b:
                    curr_liquidity -= next_tick.liquidity_net
                else:
                    curr_liquidity += next_tick.liquidity_net
                logger.debug("crossed tick %d, liquidity=%d", next_tick_index, curr_liquidity)
            curr_tick_index = next_tick_index - 1 if a_to_b else next_tick_index
        else:
            curr_tick_index = sqrt_price_to_tick_index(step.next_sqrt_price)

        curr_sqrt_price = step.next_sqrt_price

    if a_to_b == amount_specified_is_input:
        amount_a, amount_b = token_amount - amount_remaining, amount_calculated
    else:
        amount_a, amount_b = amount_calculated, token_amount - amount_remaining

    return SwapResult(
        amount_a=amount_a,
        amount_b=amount_b,
        next_tick_index=curr_tick_index,
        next_sqrt_price=curr_sqrt_price,
        total_fee_amount=total_fee_amount,
        protocol_fee_amount=protocol_fee_amount,
        next_fee_growth_global_input=fee_growth_global_input,
    )
