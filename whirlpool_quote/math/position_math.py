"""
Position Math - 포지션 범위 상태 분류

현재 가격이 포지션 범위의 아래/안/위 중 어디에 있는지 판정합니다.
두 가지 규칙을 모두 제공합니다:

- tick 기반: tickCurrentIndex를 경계 틱과 비교 (하한 포함 시 아래)
    tick_current <= tick_lower          -> BELOW_RANGE
    tick_lower < tick_current < upper   -> IN_RANGE
    tick_current >= tick_upper          -> ABOVE_RANGE
- strict 가격 기반: 실제 sqrtPrice를 경계 sqrt price와 비교
    sqrt_price <= sqrt_lower            -> BELOW_RANGE
    sqrt_price >= sqrt_upper            -> ABOVE_RANGE

틱의 대표 가격과 실제 경계 가격이 다르기 때문에 경계 근처에서 두 규칙이
한 틱만큼 다른 결과를 낼 수 있습니다. 호출 지점마다 필요한 규칙을 고릅니다.

References:
- Whirlpool SDK: utils/position-util.ts
- Whirlpool core: math/position.rs
"""

from enum import Enum
from typing import NamedTuple

from ..constants import BPS_DENOMINATOR
from .tick_math import tick_index_to_sqrt_price
from .tick_utils import order_tick_indexes


class PositionStatus(Enum):
    BELOW_RANGE = "below_range"
    IN_RANGE = "in_range"
    ABOVE_RANGE = "above_range"
    INVALID = "invalid"


class PositionRatio(NamedTuple):
    """포지션 가치 중 token A/B 비중 (bps, 합 10000)"""
    ratio_a: int
    ratio_b: int


def get_position_status(tick_current_index: int, tick_lower_index: int, tick_upper_index: int) -> PositionStatus:
    """tick 기반 포지션 상태"""
    if tick_current_index <= tick_lower_index:
        return PositionStatus.BELOW_RANGE
    elif tick_current_index < tick_upper_index:
        return PositionStatus.IN_RANGE
    else:
        return PositionStatus.ABOVE_RANGE


def get_strict_position_status(sqrt_price: int, tick_lower_index: int, tick_upper_index: int) -> PositionStatus:
    """strict 가격 기반 포지션 상태

    하한과 상한이 같으면 INVALID. 틱 순서는 자동으로 정렬합니다.
    """
    if tick_lower_index == tick_upper_index:
        return PositionStatus.INVALID

    tick_range = order_tick_indexes(tick_lower_index, tick_upper_index)
    sqrt_price_lower = tick_index_to_sqrt_price(tick_range.tick_lower_index)
    sqrt_price_upper = tick_index_to_sqrt_price(tick_range.tick_upper_index)

    if sqrt_price <= sqrt_price_lower:
        return PositionStatus.BELOW_RANGE
    elif sqrt_price >= sqrt_price_upper:
        return PositionStatus.ABOVE_RANGE
    else:
        return PositionStatus.IN_RANGE


def is_position_in_range(sqrt_price: int, tick_lower_index: int, tick_upper_index: int) -> bool:
    return get_strict_position_status(sqrt_price, tick_lower_index, tick_upper_index) == PositionStatus.IN_RANGE


def position_ratio(sqrt_price: int, tick_lower_index: int, tick_upper_index: int) -> PositionRatio:
    """현재 가격에서 포지션 가치의 token A/B 비중

    범위 안일 때 유동성 2^128 기준으로 예치량을 구해 B 단위 가치로 비교합니다:
        deposit_a = (2^192 / √P - 2^192 / √P_u) * √P^2 >> 128
        deposit_b = 2^128 * (√P - √P_l) >> 64
    """
    status = get_strict_position_status(sqrt_price, tick_lower_index, tick_upper_index)
    if status == PositionStatus.INVALID:
        return PositionRatio(0, 0)
    if status == PositionStatus.BELOW_RANGE:
        return PositionRatio(BPS_DENOMINATOR, 0)
    if status == PositionStatus.ABOVE_RANGE:
        return PositionRatio(0, BPS_DENOMINATOR)

    tick_range = order_tick_indexes(tick_lower_index, tick_upper_index)
    sqrt_price_lower = tick_index_to_sqrt_price(tick_range.tick_lower_index)
    sqrt_price_upper = tick_index_to_sqrt_price(tick_range.tick_upper_index)

    liquidity = 1 << 128
    deposit_a = ((liquidity << 64) // sqrt_price - (liquidity << 64) // sqrt_price_upper)
    deposit_a = (deposit_a * sqrt_price * sqrt_price) >> 128
    deposit_b = (liquidity * (sqrt_price - sqrt_price_lower)) >> 64

    total_deposit = deposit_a + deposit_b
    ratio_a = deposit_a * BPS_DENOMINATOR // total_deposit
    return PositionRatio(ratio_a, BPS_DENOMINATOR - ratio_a)
