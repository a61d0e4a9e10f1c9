"""
Fee Math 테스트

범위 내 수수료 / 리워드 성장률 계산 함수들을 테스트합니다.
"""

from ..math.fee_math import (
    fee_growth_above,
    fee_growth_below,
    fee_growth_inside,
    calculate_uncollected_fees,
    next_reward_growth_global,
    calculate_protocol_fee,
    next_fee_growth_global,
)
from ..constants import Q64, U128_MAX


class TestFeeGrowthAbove:
    """fee_growth_above 테스트 (f_a)"""

    def test_current_tick_above_target(self):
        """현재 틱이 타겟 틱 위에 있을 때: f_a = f_g - f_o"""
        assert fee_growth_above(100, 150, 1000, 300) == 700

    def test_current_tick_at_target(self):
        """현재 틱이 타겟 틱과 같을 때: f_a = f_g - f_o"""
        assert fee_growth_above(100, 100, 1000, 300) == 700

    def test_current_tick_below_target(self):
        """현재 틱이 타겟 틱 아래에 있을 때: f_a = f_o"""
        assert fee_growth_above(100, 50, 1000, 300) == 300


class TestFeeGrowthBelow:
    """fee_growth_below 테스트 (f_b)"""

    def test_current_tick_above_target(self):
        """현재 틱이 타겟 틱 위에 있을 때: f_b = f_o"""
        assert fee_growth_below(100, 150, 1000, 300) == 300

    def test_current_tick_at_target(self):
        assert fee_growth_below(100, 100, 1000, 300) == 300

    def test_current_tick_below_target(self):
        """현재 틱이 타겟 틱 아래에 있을 때: f_b = f_g - f_o"""
        assert fee_growth_below(100, 50, 1000, 300) == 700

    def test_wrapping(self):
        """f_o > f_g이면 2^128 랩어라운드"""
        assert fee_growth_below(100, 50, 100, 300) == U128_MAX + 1 - 200


class TestFeeGrowthInside:
    """fee_growth_inside 테스트 (f_r)"""

    def test_in_range(self):
        assert fee_growth_inside(5, 10, 7, 800, 50, 50) == 700

    def test_below_range(self):
        assert fee_growth_inside(5, 10, 0, 800, 50, 50) == 0

    def test_above_range(self):
        assert fee_growth_inside(5, 10, 15, 800, 50, 50) == 0

    def test_wraps_instead_of_negative(self):
        result = fee_growth_inside(5, 10, 7, 100, 80, 80)
        assert result == U128_MAX + 1 - 60


class TestUncollectedFees:
    """calculate_uncollected_fees 테스트"""

    def test_basic(self):
        """유동성 1000, growth 차이 2 (Q64) -> 2000"""
        assert calculate_uncollected_fees(1000, 5 * Q64, 3 * Q64) == 2000

    def test_rounds_down(self):
        assert calculate_uncollected_fees(10 ** 19, 700, 300) == 216

    def test_zero_delta(self):
        assert calculate_uncollected_fees(10 ** 19, 500, 500) == 0

    def test_zero_liquidity(self):
        assert calculate_uncollected_fees(0, 700, 300) == 0

    def test_product_overflow_is_zero(self):
        """유동성 × growth 차이가 u128을 넘으면 0"""
        assert calculate_uncollected_fees(10 ** 19, 0, 300) == 0


class TestRewardGrowth:
    """next_reward_growth_global 테스트"""

    def test_advance(self):
        assert next_reward_growth_global(0, 100 * Q64, 50, 10) == 20 * Q64

    def test_zero_liquidity(self):
        assert next_reward_growth_global(7, 100 * Q64, 0, 10) == 7

    def test_no_time_elapsed(self):
        assert next_reward_growth_global(7, 100 * Q64, 50, 0) == 7


class TestProtocolFee:
    """calculate_protocol_fee / next_fee_growth_global 테스트"""

    def test_protocol_fee(self):
        """protocol_fee_rate 300 = 3%"""
        assert calculate_protocol_fee(3000, 300) == 90
        assert calculate_protocol_fee(33, 300) == 0

    def test_next_fee_growth_global(self):
        assert next_fee_growth_global(0, 1000, 1000) == Q64
        assert next_fee_growth_global(5, 1000, 0) == 5
