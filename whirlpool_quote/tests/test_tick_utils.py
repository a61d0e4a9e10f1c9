"""
Tick Utils 테스트

tick spacing 정렬과 틱 배열 경계 계산을 테스트합니다.
"""

import pytest

from ..math.tick_utils import (
    get_tick_array_start_tick_index,
    get_swap_tick_array_start_indexes,
    get_initializable_tick_index,
    get_next_initializable_tick_index,
    get_prev_initializable_tick_index,
    get_full_range_tick_indexes,
    get_tick_index_in_array,
    get_tick_from_array,
    find_next_initialized_tick_index,
    find_previous_initialized_tick_index,
    is_tick_index_in_bounds,
    is_tick_initializable,
    is_full_range_only,
    order_tick_indexes,
    check_tick_in_bounds,
)
from ..constants import MIN_TICK, MAX_TICK
from ..data.types import TickArrayData, TickData
from ..errors import InvalidInputError, OutOfRangeError


class TestTickArrayStartTickIndex:
    """get_tick_array_start_tick_index 테스트"""

    def test_vectors(self):
        assert get_tick_array_start_tick_index(0, 8) == 0
        assert get_tick_array_start_tick_index(740, 8) == 704
        assert get_tick_array_start_tick_index(338433, 128) == 337920
        assert get_tick_array_start_tick_index(-624, 8) == -704
        assert get_tick_array_start_tick_index(-337409, 128) == -337920

    def test_offset(self):
        """offset만큼 배열 이동"""
        assert get_tick_array_start_tick_index(0, 64, 1) == 5632
        assert get_tick_array_start_tick_index(0, 64, -1) == -5632

    def test_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            get_tick_array_start_tick_index(MAX_TICK, 1, 1)
        with pytest.raises(OutOfRangeError):
            get_tick_array_start_tick_index(MIN_TICK, 1, -1)

    def test_invalid_tick_spacing(self):
        with pytest.raises(InvalidInputError):
            get_tick_array_start_tick_index(0, 0)


class TestSwapTickArrayStartIndexes:
    """스왑 방향 틱 배열 시작 틱"""

    def test_a_to_b(self):
        assert get_swap_tick_array_start_indexes(0, 64, True) == [0, -5632, -11264]

    def test_b_to_a(self):
        assert get_swap_tick_array_start_indexes(0, 64, False) == [0, 5632, 11264]

    def test_b_to_a_shifts_by_tick_spacing(self):
        """배열 마지막 틱에서 b->a는 다음 배열부터"""
        assert get_swap_tick_array_start_indexes(5631, 64, False)[0] == 5632

    def test_truncated_at_bounds(self):
        starts = get_swap_tick_array_start_indexes(MAX_TICK - 1, 64, False)
        assert len(starts) < 3


class TestInitializableTickIndex:
    """tick spacing 그리드 정렬"""

    def test_nearest(self):
        assert get_initializable_tick_index(31, 64) == 0
        assert get_initializable_tick_index(32, 64) == 64
        assert get_initializable_tick_index(-1, 64) == 0
        assert get_initializable_tick_index(-40, 64) == -64

    def test_round_up(self):
        assert get_initializable_tick_index(1, 64, True) == 64
        assert get_initializable_tick_index(64, 64, True) == 64

    def test_round_down(self):
        assert get_initializable_tick_index(63, 64, False) == 0
        assert get_initializable_tick_index(-1, 64, False) == -64

    def test_next_and_prev(self):
        assert get_next_initializable_tick_index(0, 64) == 64
        assert get_next_initializable_tick_index(-1, 64) == 0
        assert get_prev_initializable_tick_index(0, 64) == -64
        assert get_prev_initializable_tick_index(63, 64) == 0

    def test_is_tick_initializable(self):
        assert is_tick_initializable(128, 64)
        assert is_tick_initializable(-128, 64)
        assert not is_tick_initializable(1, 64)


class TestTickBounds:
    """틱 범위와 full range"""

    def test_in_bounds(self):
        assert is_tick_index_in_bounds(MIN_TICK)
        assert is_tick_index_in_bounds(MAX_TICK)
        assert not is_tick_index_in_bounds(MAX_TICK + 1)

    def test_check_tick_in_bounds(self):
        assert check_tick_in_bounds(0) == 0
        with pytest.raises(OutOfRangeError):
            check_tick_in_bounds(MIN_TICK - 1)

    def test_full_range(self):
        assert get_full_range_tick_indexes(1) == (MIN_TICK, MAX_TICK)
        assert get_full_range_tick_indexes(64) == (-443584, 443584)

    def test_full_range_only(self):
        assert is_full_range_only(32896)
        assert not is_full_range_only(64)

    def test_order_tick_indexes(self):
        assert order_tick_indexes(5, -5) == (-5, 5)
        assert order_tick_indexes(-5, 5).tick_upper_index == 5


class TestTickArrayLookup:
    """틱 배열 내 조회"""

    def setup_method(self):
        self.tick_array = TickArrayData.with_ticks(0, 64, {
            128: TickData(initialized=True, liquidity_net=10, liquidity_gross=10),
            640: TickData(initialized=True, liquidity_net=-10, liquidity_gross=10),
        })

    def test_index_in_array(self):
        assert get_tick_index_in_array(128, 0, 64) == 2
        assert get_tick_index_in_array(5631, 0, 64) == 87

    def test_index_out_of_array(self):
        with pytest.raises(InvalidInputError):
            get_tick_index_in_array(5632, 0, 64)
        with pytest.raises(InvalidInputError):
            get_tick_index_in_array(-1, 0, 64)

    def test_get_tick(self):
        assert get_tick_from_array(self.tick_array, 128, 64).liquidity_net == 10
        assert not get_tick_from_array(self.tick_array, 192, 64).initialized

    def test_find_next(self):
        assert find_next_initialized_tick_index(self.tick_array, 0, 64) == 128
        assert find_next_initialized_tick_index(self.tick_array, 128, 64) == 640
        assert find_next_initialized_tick_index(self.tick_array, 640, 64) is None

    def test_find_previous(self):
        assert find_previous_initialized_tick_index(self.tick_array, 640, 64) == 640
        assert find_previous_initialized_tick_index(self.tick_array, 600, 64) == 128
        assert find_previous_initialized_tick_index(self.tick_array, 64, 64) is None
