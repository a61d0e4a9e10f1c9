"""
Token Math - 유동성 ↔ 토큰 수량 변환

Whirlpool 집중화된 유동성(Concentrated Liquidity) 계산.
특정 가격 범위에서의 토큰 수량과 유동성 간의 변환.

References:
- Whirlpool SDK: utils/position-util.ts
- Whirlpool program: math/token_math.rs

핵심 공식 (Q64.64):
    ΔA = L * (√P_u - √P_l) * 2^64 / (√P_l * √P_u)
    ΔB = L * (√P_u - √P_l) / 2^64
    L = ΔA * √P_l * √P_u / (√P_u - √P_l) / 2^64   # token A 기준
    L = ΔB * 2^64 / (√P_u - √P_l)                  # token B 기준

토큰 수량은 u64, 유동성은 u128을 넘으면 AmountOverflowError.
토큰 → 유동성 방향은 항상 내림 (예산으로 유동성을 과대평가하지 않음).
"""

from typing import NamedTuple

from .fixed_point import check_u64, check_u128, div_round_up
from .position_math import PositionStatus
from .tick_math import tick_index_to_sqrt_price


class TokenAmounts(NamedTuple):
    """(token A, token B) 수량"""
    token_a: int
    token_b: int


ZERO_AMOUNTS = TokenAmounts(0, 0)


def _order_sqrt_prices(sqrt_price_0: int, sqrt_price_1: int):
    if sqrt_price_0 > sqrt_price_1:
        return sqrt_price_1, sqrt_price_0
    return sqrt_price_0, sqrt_price_1


def get_token_a_from_liquidity(
    liquidity: int,
    sqrt_price_0: int,
    sqrt_price_1: int,
    round_up: bool
) -> int:
    """유동성에서 token A 수량 계산

    공식: ΔA = L * (√P_b - √P_a) * 2^64 / (√P_a * √P_b)

    Args:
        liquidity: 유동성
        sqrt_price_0: sqrtPriceX64 (순서 무관)
        sqrt_price_1: sqrtPriceX64 (순서 무관)
        round_up: True면 올림, False면 내림

    Returns:
        token A 수량 (최소 단위)

    Raises:
        AmountOverflowError: 결과가 u64를 넘는 경우
    """
    sqrt_price_lower, sqrt_price_upper = _order_sqrt_prices(sqrt_price_0, sqrt_price_1)

    numerator = (liquidity * (sqrt_price_upper - sqrt_price_lower)) << 64
    denominator = sqrt_price_upper * sqrt_price_lower

    if round_up:
        result = div_round_up(numerator, denominator)
    else:
        result = numerator // denominator
    return check_u64(result, "token A amount")


def get_token_b_from_liquidity(
    liquidity: int,
    sqrt_price_0: int,
    sqrt_price_1: int,
    round_up: bool
) -> int:
    """유동성에서 token B 수량 계산

    공식: ΔB = L * (√P_b - √P_a) / 2^64

    Args:
        liquidity: 유동성
        sqrt_price_0: sqrtPriceX64 (순서 무관)
        sqrt_price_1: sqrtPriceX64 (순서 무관)
        round_up: True면 올림, False면 내림

    Returns:
        token B 수량 (최소 단위)
    """
    sqrt_price_lower, sqrt_price_upper = _order_sqrt_prices(sqrt_price_0, sqrt_price_1)

    product = liquidity * (sqrt_price_upper - sqrt_price_lower)
    result = product >> 64
    # 하위 64비트가 남아 있으면 올림
    if round_up and product & 0xFFFFFFFFFFFFFFFF:
        result += 1
    return check_u64(result, "token B amount")


def get_liquidity_from_token_a(amount: int, sqrt_price_0: int, sqrt_price_1: int) -> int:
    """token A 수량에서 유동성 계산 (내림)

    공식: L = ΔA * √P_a * √P_b / (√P_b - √P_a) / 2^64
    """
    sqrt_price_lower, sqrt_price_upper = _order_sqrt_prices(sqrt_price_0, sqrt_price_1)
    # Guard against division by zero (identical sqrt prices)
    if sqrt_price_upper <= sqrt_price_lower:
        return 0

    result = (amount * sqrt_price_lower * sqrt_price_upper // (sqrt_price_upper - sqrt_price_lower)) >> 64
    return check_u128(result, "liquidity")


def get_liquidity_from_token_b(amount: int, sqrt_price_0: int, sqrt_price_1: int) -> int:
    """token B 수량에서 유동성 계산 (내림)

    공식: L = ΔB * 2^64 / (√P_b - √P_a)
    """
    sqrt_price_lower, sqrt_price_upper = _order_sqrt_prices(sqrt_price_0, sqrt_price_1)
    if sqrt_price_upper <= sqrt_price_lower:
        return 0

    result = (amount << 64) // (sqrt_price_upper - sqrt_price_lower)
    return check_u128(result, "liquidity")


def get_token_amounts_from_liquidity(
    liquidity: int,
    sqrt_price: int,
    tick_lower_index: int,
    tick_upper_index: int,
    round_up: bool,
    status: PositionStatus
) -> TokenAmounts:
    """포지션 상태에 따라 유동성을 토큰 수량으로 분해

    - BELOW_RANGE: token A만 [lower, upper] 전체 구간
    - IN_RANGE: token A는 [current, upper], token B는 [lower, current]
    - ABOVE_RANGE: token B만 [lower, upper] 전체 구간
    """
    if liquidity == 0 or status == PositionStatus.INVALID:
        return ZERO_AMOUNTS

    sqrt_price_lower = tick_index_to_sqrt_price(tick_lower_index)
    sqrt_price_upper = tick_index_to_sqrt_price(tick_upper_index)

    if status == PositionStatus.BELOW_RANGE:
        return TokenAmounts(
            get_token_a_from_liquidity(liquidity, sqrt_price_lower, sqrt_price_upper, round_up),
            0,
        )
    elif status == PositionStatus.IN_RANGE:
        return TokenAmounts(
            get_token_a_from_liquidity(liquidity, sqrt_price, sqrt_price_upper, round_up),
            get_token_b_from_liquidity(liquidity, sqrt_price_lower, sqrt_price, round_up),
        )
    else:
        return TokenAmounts(
            0,
            get_token_b_from_liquidity(liquidity, sqrt_price_lower, sqrt_price_upper, round_up),
        )


def get_liquidity_from_input_token(
    amount: int,
    is_token_a: bool,
    sqrt_price: int,
    tick_lower_index: int,
    tick_upper_index: int,
    status: PositionStatus
) -> int:
    """예치할 토큰 한쪽 수량에서 유동성 계산

    현재 범위에 해당 토큰이 필요 없는 경우(잘못된 쪽 토큰) 0을 반환합니다.
    """
    if amount == 0 or status == PositionStatus.INVALID:
        return 0

    sqrt_price_lower = tick_index_to_sqrt_price(tick_lower_index)
    sqrt_price_upper = tick_index_to_sqrt_price(tick_upper_index)

    if status == PositionStatus.BELOW_RANGE:
        return get_liquidity_from_token_a(amount, sqrt_price_lower, sqrt_price_upper) if is_token_a else 0
    elif status == PositionStatus.ABOVE_RANGE:
        return 0 if is_token_a else get_liquidity_from_token_b(amount, sqrt_price_lower, sqrt_price_upper)
    elif is_token_a:
        return get_liquidity_from_token_a(amount, sqrt_price, sqrt_price_upper)
    else:
        return get_liquidity_from_token_b(amount, sqrt_price_lower, sqrt_price)
