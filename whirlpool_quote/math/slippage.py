"""
Slippage Math - 슬리피지 허용치 적용

두 가지 모델:
1. 수량 비율 (AMOUNT): 추정 수량에 (1 ± t)를 곱함, 사용자에게 불리한 방향으로 반올림
    up   = ceil(n * (den + num) / den)
    down = floor(n * (den - num) / den)
2. 가격 경계 (PRICE_BOUND): sqrt price 자체를 (1 ± t)만큼 이동시킨 뒤
   quote를 다시 계산 (MIN/MAX sqrt price로 클램프)
    lower = floor(√P * (den - num) / den)
    upper = ceil(√P * (den + num) / den)
"""

from typing import NamedTuple

from ..constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE
from ..data.types import Percentage
from ..errors import InvalidInputError
from .fixed_point import mul_div_floor, mul_div_round_up
from .tick_math import sqrt_price_to_tick_index


class SqrtPriceBound(NamedTuple):
    sqrt_price: int
    tick_index: int


class SlippageBounds(NamedTuple):
    """슬리피지만큼 이동한 하한/상한 가격"""
    lower: SqrtPriceBound
    upper: SqrtPriceBound


def adjust_for_slippage(amount: int, slippage: Percentage, round_up: bool) -> int:
    """추정 수량에 슬리피지 적용

    Args:
        amount: 추정 수량
        slippage: 허용치
        round_up: True면 최대치(지불 상한), False면 최소치(수령 하한)

    Returns:
        슬리피지가 반영된 수량
    """
    num, den = slippage.numerator, slippage.denominator
    if round_up:
        return mul_div_round_up(amount, den + num, den)
    if num > den:
        raise InvalidInputError(f"slippage must not exceed 100% when adjusting down: {slippage}")
    return mul_div_floor(amount, den - num, den)


def get_slippage_bound_for_sqrt_price(sqrt_price: int, slippage: Percentage) -> SlippageBounds:
    """sqrt price를 슬리피지만큼 아래/위로 이동

    Returns:
        (lower, upper) 각각 (sqrt_price, tick_index)
    """
    num, den = slippage.numerator, slippage.denominator

    lower_sqrt_price = mul_div_floor(sqrt_price, max(den - num, 0), den)
    upper_sqrt_price = mul_div_round_up(sqrt_price, den + num, den)

    lower_sqrt_price = min(max(lower_sqrt_price, MIN_SQRT_PRICE), MAX_SQRT_PRICE)
    upper_sqrt_price = min(max(upper_sqrt_price, MIN_SQRT_PRICE), MAX_SQRT_PRICE)

    return SlippageBounds(
        lower=SqrtPriceBound(lower_sqrt_price, sqrt_price_to_tick_index(lower_sqrt_price)),
        upper=SqrtPriceBound(upper_sqrt_price, sqrt_price_to_tick_index(upper_sqrt_price)),
    )
