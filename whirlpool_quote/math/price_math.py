"""
Price Math - sqrt price ↔ human-readable 가격 변환

Whirlpool 가격은 sqrtPriceX64 형식으로 저장됩니다.
sqrtPriceX64 = sqrt(price) * 2^64

References:
- Whirlpool SDK: utils/public/price-math.ts
- Whirlpool core: math/price.rs

핵심 공식:
    price = (sqrtPriceX64 / 2^64)^2 * 10^(decimalsA - decimalsB)
    sqrtPriceX64 = sqrt(price * 10^(decimalsB - decimalsA)) * 2^64

float 대신 Decimal을 사용해 u128 전체 범위를 손실 없이 다룹니다.
"""

from decimal import Decimal, localcontext
from typing import Union

from ..errors import InvalidInputError
from .fixed_point import DECIMAL_PRECISION, from_x64, to_x64
from .tick_math import invert_tick_index, sqrt_price_to_tick_index, tick_index_to_sqrt_price
from .tick_utils import get_initializable_tick_index

PriceLike = Union[Decimal, int, float, str]


def _to_decimal(value: PriceLike) -> Decimal:
    # float는 repr 기준으로 변환 (0.1 -> Decimal("0.1"))
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def sqrt_price_to_price(sqrt_price: int, decimals_a: int, decimals_b: int) -> Decimal:
    """sqrtPriceX64를 human-readable 가격으로 변환

    Args:
        sqrt_price: sqrtPriceX64 값
        decimals_a: token A 소수점 자릿수
        decimals_b: token B 소수점 자릿수

    Returns:
        가격 (token B per token A, human-readable)
    """
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return from_x64(sqrt_price) ** 2 * Decimal(10) ** (decimals_a - decimals_b)


def price_to_sqrt_price(price: PriceLike, decimals_a: int, decimals_b: int) -> int:
    """Human-readable 가격을 sqrtPriceX64로 변환

    Args:
        price: 가격 (token B per token A)
        decimals_a: token A 소수점 자릿수
        decimals_b: token B 소수점 자릿수

    Returns:
        sqrtPriceX64 값 (내림)
    """
    price = _to_decimal(price)
    if price <= 0:
        raise InvalidInputError(f"price must be positive: {price}")

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        adjusted = price * Decimal(10) ** (decimals_b - decimals_a)
        return to_x64(adjusted.sqrt())


def tick_index_to_price(tick: int, decimals_a: int, decimals_b: int) -> Decimal:
    """틱을 human-readable 가격으로 변환"""
    return sqrt_price_to_price(tick_index_to_sqrt_price(tick), decimals_a, decimals_b)


def price_to_tick_index(price: PriceLike, decimals_a: int, decimals_b: int) -> int:
    """Human-readable 가격을 틱으로 변환 (가격을 넘지 않는 가장 큰 틱)"""
    return sqrt_price_to_tick_index(price_to_sqrt_price(price, decimals_a, decimals_b))


def price_to_initializable_tick_index(
    price: PriceLike,
    decimals_a: int,
    decimals_b: int,
    tick_spacing: int
) -> int:
    """가격에 가장 가까운 initializable 틱"""
    tick = price_to_tick_index(price, decimals_a, decimals_b)
    return get_initializable_tick_index(tick, tick_spacing)


def invert_price(price: PriceLike, decimals_a: int, decimals_b: int) -> Decimal:
    """B/A 가격을 A/B 가격으로 뒤집기 (틱 단위로 근사)"""
    tick = price_to_tick_index(price, decimals_a, decimals_b)
    return tick_index_to_price(invert_tick_index(tick), decimals_b, decimals_a)
