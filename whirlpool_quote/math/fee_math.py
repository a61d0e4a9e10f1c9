"""
Fee Math - 범위 내 수수료 / 리워드 성장률 계산

Whirlpool 프로그램의 fee growth 누적 방식을 그대로 따릅니다.
모든 growth 값은 Q64.64 (유동성 1단위당 누적량)이고 u128 wrapping 연산을 사용합니다.

References:
- Whirlpool program: manager/position_manager.rs, manager/tick_manager.rs
- Uniswap V3 백서 Section 6.3, 6.4.1 (같은 구조의 feeGrowthOutside)

핵심 공식:
    f_b(i) = f_o(i)        if i_c >= i else f_g - f_o(i)   # 틱 i 아래
    f_a(i) = f_o(i)        if i_c <  i else f_g - f_o(i)   # 틱 i 위
    f_r = f_g - f_b(i_l) - f_a(i_u)                       # 범위 내 (mod 2^128)
    f_u = l × (f_r(t_1) - f_r(t_0)) >> 64                 # 미수령 수량
"""

from ..constants import PROTOCOL_FEE_RATE_MUL_VALUE, U128_MAX
from .fixed_point import wrapping_add_u128, wrapping_sub_u128


def fee_growth_below(
    tick_idx: int,
    current_tick: int,
    growth_global: int,
    growth_outside: int
) -> int:
    """틱 아래에서 발생한 성장률 (f_b)

    Args:
        tick_idx: 틱 인덱스 (i)
        current_tick: 현재 틱 (i_c)
        growth_global: 전역 growth (f_g)
        growth_outside: 틱의 growth outside (f_o)

    Returns:
        틱 아래의 growth (f_b)
    """
    if current_tick < tick_idx:
        return wrapping_sub_u128(growth_global, growth_outside)
    return growth_outside


def fee_growth_above(
    tick_idx: int,
    current_tick: int,
    growth_global: int,
    growth_outside: int
) -> int:
    """틱 위에서 발생한 성장률 (f_a)"""
    if current_tick >= tick_idx:
        return wrapping_sub_u128(growth_global, growth_outside)
    return growth_outside


def fee_growth_inside(
    tick_lower: int,
    tick_upper: int,
    current_tick: int,
    growth_global: int,
    growth_outside_lower: int,
    growth_outside_upper: int
) -> int:
    """범위 내 growth 계산 (f_r)

    온체인 u128 연산과 같이 음수는 2^128 랩어라운드.

    Args:
        tick_lower: 하한 틱 (i_l)
        tick_upper: 상한 틱 (i_u)
        current_tick: 현재 틱 (i_c)
        growth_global: 전역 growth (f_g)
        growth_outside_lower: 하한 틱의 growth outside (f_o(i_l))
        growth_outside_upper: 상한 틱의 growth outside (f_o(i_u))

    Returns:
        범위 내 growth (f_r)
    """
    f_b = fee_growth_below(tick_lower, current_tick, growth_global, growth_outside_lower)
    f_a = fee_growth_above(tick_upper, current_tick, growth_global, growth_outside_upper)
    return wrapping_sub_u128(wrapping_sub_u128(growth_global, f_b), f_a)


def calculate_uncollected_fees(
    liquidity: int,
    growth_inside_current: int,
    growth_inside_checkpoint: int
) -> int:
    """체크포인트 이후 적립된 미수령 수량 (f_u)

    growth 차이는 u128 wrapping. 유동성과의 곱이 u128을 넘으면 0으로 처리합니다
    (온체인에서 도달할 수 없는 상태).

    Returns:
        미수령 수량 (최소 단위, 내림)
    """
    growth_delta = wrapping_sub_u128(growth_inside_current, growth_inside_checkpoint)
    if growth_delta == 0 or liquidity == 0:
        return 0

    product = liquidity * growth_delta
    if product > U128_MAX:
        return 0
    return product >> 64


def next_reward_growth_global(
    growth_global: int,
    emissions_per_second_x64: int,
    pool_liquidity: int,
    time_delta: int
) -> int:
    """마지막 업데이트 이후 시간만큼 리워드 전역 growth 진행

    풀 유동성이 0이면 방출분은 누구에게도 쌓이지 않습니다.
    """
    if pool_liquidity == 0 or time_delta <= 0:
        return growth_global
    growth_delta = emissions_per_second_x64 * time_delta // pool_liquidity
    return wrapping_add_u128(growth_global, growth_delta)


def calculate_protocol_fee(fee_amount: int, protocol_fee_rate: int) -> int:
    """스왑 수수료 중 프로토콜 몫 (bps 단위, 내림)"""
    return fee_amount * protocol_fee_rate // PROTOCOL_FEE_RATE_MUL_VALUE


def next_fee_growth_global(growth_global: int, lp_fee_amount: int, liquidity: int) -> int:
    """LP 몫 수수료를 현재 유동성에 분배한 전역 fee growth"""
    if liquidity == 0:
        return growth_global
    return wrapping_add_u128(growth_global, (lp_fee_amount << 64) // liquidity)
