"""
Tick Utils - 틱 간격 정렬 및 틱 배열 경계 계산

References:
- Whirlpool SDK: utils/public/tick-utils.ts
- Whirlpool core: math/tick.rs

틱 배열 하나는 TICK_ARRAY_SIZE(88)개의 initializable 틱을 담습니다.
    start = floor(tick / (tickSpacing * 88)) * tickSpacing * 88
    inner_index = floor((tick - start) / tickSpacing)
Python의 // 는 floor division이므로 음수 틱도 그대로 처리됩니다.
"""

from typing import List, NamedTuple, Optional

from ..constants import (
    FULL_RANGE_ONLY_TICK_SPACING_THRESHOLD,
    MAX_TICK,
    MIN_TICK,
    TICK_ARRAY_SIZE,
)
from ..data.types import TickArrayData, TickData
from ..errors import InvalidInputError, OutOfRangeError


class TickRange(NamedTuple):
    """포지션 틱 범위"""
    tick_lower_index: int
    tick_upper_index: int


def _check_tick_spacing(tick_spacing: int) -> None:
    if tick_spacing <= 0:
        raise InvalidInputError(f"tick spacing must be positive: {tick_spacing}")


def get_tick_array_start_tick_index(tick: int, tick_spacing: int, offset: int = 0) -> int:
    """틱이 속한 틱 배열의 시작 틱 (offset만큼 배열 이동)

    Args:
        tick: 틱 인덱스
        tick_spacing: 틱 간격
        offset: 이동할 배열 수 (음수면 왼쪽)

    Returns:
        틱 배열 시작 틱

    Raises:
        OutOfRangeError: 결과가 MIN_TICK을 담는 배열보다 작거나 MAX_TICK보다 큰 경우
    """
    _check_tick_spacing(tick_spacing)
    ticks_in_array = tick_spacing * TICK_ARRAY_SIZE
    start_tick_index = (tick // ticks_in_array + offset) * ticks_in_array

    min_start_tick_index = (MIN_TICK // ticks_in_array) * ticks_in_array
    if start_tick_index < min_start_tick_index:
        raise OutOfRangeError(f"start tick index is too small: {start_tick_index}")
    if start_tick_index > MAX_TICK:
        raise OutOfRangeError(f"start tick index is too large: {start_tick_index}")
    return start_tick_index


def get_swap_tick_array_start_indexes(
    tick_current_index: int,
    tick_spacing: int,
    a_to_b: bool,
    count: int = 3
) -> List[int]:
    """스왑 방향으로 필요한 틱 배열 시작 틱 목록

    b->a 스왑은 현재 틱 + tick_spacing 부터 탐색하므로 그 틱 기준으로 시작합니다.
    범위를 벗어나는 배열은 목록에서 빠집니다.
    """
    shift = 0 if a_to_b else tick_spacing
    starts = []
    for i in range(count):
        offset = -i if a_to_b else i
        try:
            starts.append(get_tick_array_start_tick_index(tick_current_index + shift, tick_spacing, offset))
        except OutOfRangeError:
            break
    return starts


def get_initializable_tick_index(
    tick: int,
    tick_spacing: int,
    round_up: Optional[bool] = None
) -> int:
    """틱을 tick spacing 그리드에 맞추기

    Args:
        tick: 정렬할 틱
        tick_spacing: 틱 간격
        round_up: None이면 가장 가까운 그리드 틱 (절반은 올림), True면 올림, False면 내림

    Returns:
        initializable 틱
    """
    _check_tick_spacing(tick_spacing)
    remainder = tick % tick_spacing
    result = tick - remainder

    if round_up is None:
        should_round_up = remainder > 0 and remainder >= tick_spacing // 2
    else:
        should_round_up = round_up and remainder > 0

    if should_round_up:
        return result + tick_spacing
    return result


def get_next_initializable_tick_index(tick: int, tick_spacing: int) -> int:
    """tick보다 큰 첫 번째 initializable 틱"""
    _check_tick_spacing(tick_spacing)
    return tick - (tick % tick_spacing) + tick_spacing


def get_prev_initializable_tick_index(tick: int, tick_spacing: int) -> int:
    """tick보다 작은 마지막 initializable 틱"""
    _check_tick_spacing(tick_spacing)
    remainder = tick % tick_spacing
    if remainder == 0:
        return tick - tick_spacing
    return tick - remainder


def is_tick_index_in_bounds(tick: int) -> bool:
    return MIN_TICK <= tick <= MAX_TICK


def check_tick_in_bounds(tick: int, name: str = "tick") -> int:
    """범위를 벗어나면 OutOfRangeError"""
    if not is_tick_index_in_bounds(tick):
        raise OutOfRangeError(f"{name} out of range: {tick} (range: {MIN_TICK} ~ {MAX_TICK})")
    return tick


def is_tick_initializable(tick: int, tick_spacing: int) -> bool:
    _check_tick_spacing(tick_spacing)
    return tick % tick_spacing == 0


def get_full_range_tick_indexes(tick_spacing: int) -> TickRange:
    """full range 포지션의 틱 범위 (0 방향으로 정렬)"""
    _check_tick_spacing(tick_spacing)
    # MIN_TICK은 음수이므로 0 방향 절삭을 위해 -(-MIN // s) 사용
    min_tick = -((-MIN_TICK) // tick_spacing) * tick_spacing
    max_tick = (MAX_TICK // tick_spacing) * tick_spacing
    return TickRange(min_tick, max_tick)


def order_tick_indexes(tick_index_1: int, tick_index_2: int) -> TickRange:
    if tick_index_1 < tick_index_2:
        return TickRange(tick_index_1, tick_index_2)
    return TickRange(tick_index_2, tick_index_1)


def is_full_range_only(tick_spacing: int) -> bool:
    """splash pool 등 full range 포지션만 허용하는 tick spacing인지"""
    return tick_spacing >= FULL_RANGE_ONLY_TICK_SPACING_THRESHOLD


def get_tick_index_in_array(tick: int, tick_array_start_index: int, tick_spacing: int) -> int:
    """틱 배열 내 오프셋 (0 ~ 87)

    Raises:
        InvalidInputError: 틱이 배열 범위 밖인 경우
    """
    _check_tick_spacing(tick_spacing)
    upper_bound = tick_array_start_index + TICK_ARRAY_SIZE * tick_spacing
    if tick < tick_array_start_index or tick >= upper_bound:
        raise InvalidInputError(
            f"tick {tick} is not in array starting at {tick_array_start_index} (spacing {tick_spacing})"
        )
    return (tick - tick_array_start_index) // tick_spacing


def get_tick_from_array(tick_array: TickArrayData, tick: int, tick_spacing: int) -> TickData:
    return tick_array.ticks[get_tick_index_in_array(tick, tick_array.start_tick_index, tick_spacing)]


def find_next_initialized_tick_index(
    tick_array: TickArrayData,
    tick: int,
    tick_spacing: int
) -> Optional[int]:
    """배열 안에서 tick보다 오른쪽(큰 쪽)의 첫 초기화된 틱, 없으면 None"""
    inner = get_tick_index_in_array(tick, tick_array.start_tick_index, tick_spacing)
    for i in range(inner + 1, TICK_ARRAY_SIZE):
        if tick_array.ticks[i].initialized:
            return tick_array.start_tick_index + i * tick_spacing
    return None


def find_previous_initialized_tick_index(
    tick_array: TickArrayData,
    tick: int,
    tick_spacing: int
) -> Optional[int]:
    """배열 안에서 tick 이하(왼쪽)의 첫 초기화된 틱, 없으면 None"""
    inner = get_tick_index_in_array(tick, tick_array.start_tick_index, tick_spacing)
    for i in range(inner, -1, -1):
        if tick_array.ticks[i].initialized:
            return tick_array.start_tick_index + i * tick_spacing
    return None
