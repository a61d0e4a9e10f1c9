"""
Swap Math - 스왑 한 스텝 계산

현재 유동성 구간 안에서 목표 가격(다음 틱 또는 가격 한도)까지 스왑할 때의
입력/출력/수수료와 도달 가격을 계산합니다. 온체인 compute_swap과 같은 반올림.

References:
- Whirlpool program: math/swap_math.rs, math/token_math.rs
- Uniswap V3 Core: contracts/libraries/SwapMath.sol

핵심 공식 (Q64.64):
    token A 기준:  √P' = L * √P / (L ± ΔA * √P / 2^64)   (올림)
    token B 기준:  √P' = √P ± ΔB * 2^64 / L              (입력은 내림, 출력은 올림)

"고정" 쪽은 사용자가 지정한 수량의 토큰 (입력이면 입력 토큰, 출력이면 출력 토큰),
"비고정" 쪽은 계산으로 나오는 반대 토큰입니다.
"""

from typing import NamedTuple

from ..constants import FEE_RATE_MUL_VALUE, MAX_SQRT_PRICE, MIN_SQRT_PRICE
from ..errors import AmountOverflowError, OutOfRangeError
from .fixed_point import check_u64, div_round_up, mul_div_floor, mul_div_round_up
from .token_math import get_token_a_from_liquidity, get_token_b_from_liquidity


class SwapStep(NamedTuple):
    """스왑 한 스텝 결과"""
    amount_in: int
    amount_out: int
    next_sqrt_price: int
    fee_amount: int


def _check_sqrt_price_bounds(sqrt_price: int) -> int:
    if sqrt_price < MIN_SQRT_PRICE or sqrt_price > MAX_SQRT_PRICE:
        raise OutOfRangeError(
            f"next sqrt price out of range: {sqrt_price} (range: {MIN_SQRT_PRICE} ~ {MAX_SQRT_PRICE})"
        )
    return sqrt_price


def get_next_sqrt_price_from_a_round_up(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    add: bool
) -> int:
    """token A 변화에 따른 다음 sqrtPriceX64 (올림)

    A를 풀에 넣으면(add) 가격이 내려가고, 빼면 올라갑니다.

    Args:
        sqrt_price: 현재 sqrtPriceX64
        liquidity: 유동성
        amount: token A 변화량
        add: True면 추가, False면 제거

    Returns:
        새로운 sqrtPriceX64

    Raises:
        AmountOverflowError: 제거량이 유동성으로 감당할 수 없는 경우
        OutOfRangeError: 결과가 sqrt price 범위를 벗어난 경우
    """
    if amount == 0:
        return sqrt_price

    product = sqrt_price * amount
    numerator = (liquidity * sqrt_price) << 64
    liquidity_x64 = liquidity << 64

    if add:
        denominator = liquidity_x64 + product
    else:
        if liquidity_x64 <= product:
            raise AmountOverflowError(
                f"token A amount {amount} exceeds what liquidity {liquidity} can provide"
            )
        denominator = liquidity_x64 - product

    return _check_sqrt_price_bounds(div_round_up(numerator, denominator))


def get_next_sqrt_price_from_b_round_down(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    add: bool
) -> int:
    """token B 변화에 따른 다음 sqrtPriceX64 (내림)

    Args:
        sqrt_price: 현재 sqrtPriceX64
        liquidity: 유동성
        amount: token B 변화량
        add: True면 추가, False면 제거

    Returns:
        새로운 sqrtPriceX64
    """
    amount_x64 = amount << 64
    if add:
        return _check_sqrt_price_bounds(sqrt_price + amount_x64 // liquidity)

    delta = div_round_up(amount_x64, liquidity)
    if delta >= sqrt_price:
        raise OutOfRangeError(f"token B amount {amount} moves sqrt price below zero")
    return _check_sqrt_price_bounds(sqrt_price - delta)


def get_next_sqrt_price(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> int:
    """고정 쪽 토큰 수량만큼 움직인 다음 sqrtPriceX64"""
    if amount_specified_is_input == a_to_b:
        return get_next_sqrt_price_from_a_round_up(sqrt_price, liquidity, amount, amount_specified_is_input)
    return get_next_sqrt_price_from_b_round_down(sqrt_price, liquidity, amount, amount_specified_is_input)


def _raw_amount_delta_a(sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
    # u64 검사 없이 계산 (목표 가격까지 도달 가능한지 비교용)
    lower, upper = min(sqrt_price_0, sqrt_price_1), max(sqrt_price_0, sqrt_price_1)
    numerator = (liquidity * (upper - lower)) << 64
    denominator = lower * upper
    return div_round_up(numerator, denominator) if round_up else numerator // denominator


def _raw_amount_delta_b(sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
    product = liquidity * abs(sqrt_price_1 - sqrt_price_0)
    return div_round_up(product, 1 << 64) if round_up else product >> 64


def _amount_fixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> int:
    if a_to_b == amount_specified_is_input:
        return _raw_amount_delta_a(sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input)
    return _raw_amount_delta_b(sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input)


def _amount_unfixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> int:
    if a_to_b == amount_specified_is_input:
        return get_token_b_from_liquidity(
            liquidity, sqrt_price_current, sqrt_price_target, not amount_specified_is_input
        )
    return get_token_a_from_liquidity(
        liquidity, sqrt_price_current, sqrt_price_target, not amount_specified_is_input
    )


def compute_swap_step(
    amount_remaining: int,
    fee_rate: int,
    liquidity: int,
    sqrt_price_current: int,
    sqrt_price_target: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> SwapStep:
    """현재 가격에서 목표 가격 방향으로 한 스텝 스왑

    목표 가격까지 가는 데 필요한 고정 쪽 수량보다 남은 수량이 많으면
    목표 가격에 도달하고(max swap), 아니면 남은 수량이 소진되는 가격에서 멈춥니다.

    Args:
        amount_remaining: 남은 지정 수량 (입력이면 수수료 포함)
        fee_rate: 풀 수수료율 (1/1,000,000 단위)
        liquidity: 현재 활성 유동성
        sqrt_price_current: 현재 sqrtPriceX64
        sqrt_price_target: 목표 sqrtPriceX64 (다음 틱 가격 또는 가격 한도)
        amount_specified_is_input: 지정 수량이 입력이면 True
        a_to_b: A를 넣고 B를 받으면 True

    Returns:
        SwapStep (amount_in은 수수료 제외)
    """
    amount_fixed_delta = _amount_fixed_delta(
        sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input, a_to_b
    )

    amount_calc = amount_remaining
    if amount_specified_is_input:
        amount_calc = mul_div_floor(amount_remaining, FEE_RATE_MUL_VALUE - fee_rate, FEE_RATE_MUL_VALUE)

    if amount_calc >= amount_fixed_delta:
        next_sqrt_price = sqrt_price_target
    else:
        next_sqrt_price = get_next_sqrt_price(
            sqrt_price_current, liquidity, amount_calc, amount_specified_is_input, a_to_b
        )

    is_max_swap = next_sqrt_price == sqrt_price_target

    amount_unfixed_delta = _amount_unfixed_delta(
        sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
    )

    if not is_max_swap:
        amount_fixed_delta = _amount_fixed_delta(
            sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
        )
    check_u64(amount_fixed_delta, "swap step amount")

    if amount_specified_is_input:
        amount_in, amount_out = amount_fixed_delta, amount_unfixed_delta
    else:
        amount_in, amount_out = amount_unfixed_delta, amount_fixed_delta

    # 출력 지정 시 남은 수량을 넘겨 받지 않음
    if not amount_specified_is_input and amount_out > amount_remaining:
        amount_out = amount_remaining

    if amount_specified_is_input and not is_max_swap:
        fee_amount = amount_remaining - amount_in
    else:
        fee_amount = mul_div_round_up(amount_in, fee_rate, FEE_RATE_MUL_VALUE - fee_rate)

    return SwapStep(
        amount_in=amount_in,
        amount_out=amount_out,
        next_sqrt_price=next_sqrt_price,
        fee_amount=check_u64(fee_amount, "swap fee"),
    )
