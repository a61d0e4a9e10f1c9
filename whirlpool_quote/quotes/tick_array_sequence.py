"""
Tick Array Sequence - 스왑 방향으로 정렬된 틱 배열 묶음

스왑 시뮬레이션은 호출자가 넘겨준 틱 배열들(보통 3개)만 사용합니다.
a->b 스왑은 현재 배열에서 왼쪽으로, b->a 스왑은 오른쪽으로 이어지는 배열을 받습니다.

- 앞의 3개(MAX_SWAP_TICK_ARRAYS)만 쓰고, 첫 번째 빈 슬롯(None) 이후의 배열은 버립니다
- 첫 배열은 현재 틱을 포함해야 합니다 (b->a는 현재 틱 + tick_spacing)
- 시퀀스를 벗어난 탐색은 InsufficientTickArraysError (더 많은 배열로 재시도 가능)
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..constants import MAX_SWAP_TICK_ARRAYS, MAX_TICK, MIN_TICK, TICK_ARRAY_SIZE
from ..data.types import TickArrayData, TickData
from ..errors import InsufficientTickArraysError

logger = logging.getLogger(__name__)


class TickArrayIndex:
    """틱을 (배열 번호, 배열 내 오프셋)으로 표현

    array_index = floor(floor(tick / spacing) / 88)
    offset_index = floor((tick - array_index * 88 * spacing) / spacing)
    """

    def __init__(self, array_index: int, offset_index: int, tick_spacing: int):
        self.array_index = array_index
        self.offset_index = offset_index
        self.tick_spacing = tick_spacing

    @classmethod
    def from_tick_index(cls, tick: int, tick_spacing: int) -> "TickArrayIndex":
        array_index = (tick // tick_spacing) // TICK_ARRAY_SIZE
        offset_index = (tick - array_index * TICK_ARRAY_SIZE * tick_spacing) // tick_spacing
        return cls(array_index, offset_index, tick_spacing)

    def to_tick_index(self) -> int:
        return (self.array_index * TICK_ARRAY_SIZE + self.offset_index) * self.tick_spacing

    def to_next_initializable_tick_index(self) -> "TickArrayIndex":
        return TickArrayIndex.from_tick_index(self.to_tick_index() + self.tick_spacing, self.tick_spacing)

    def to_prev_initializable_tick_index(self) -> "TickArrayIndex":
        return TickArrayIndex.from_tick_index(self.to_tick_index() - self.tick_spacing, self.tick_spacing)

    def __repr__(self) -> str:
        return f"TickArrayIndex(array_index={self.array_index}, offset_index={self.offset_index})"


class TickArraySequence:
    """스왑 시뮬레이션용 틱 배열 시퀀스

    Args:
        tick_arrays: 스왑 방향 순서의 틱 배열 (없는 배열은 None)
        tick_spacing: 풀 tick spacing
        a_to_b: 스왑 방향
    """

    def __init__(
        self,
        tick_arrays: Sequence[Optional[TickArrayData]],
        tick_spacing: int,
        a_to_b: bool
    ):
        self.tick_spacing = tick_spacing
        self.a_to_b = a_to_b

        # 스왑 instruction은 틱 배열을 최대 MAX_SWAP_TICK_ARRAYS개만 받음
        self.sequence: List[TickArrayData] = []
        for tick_array in tick_arrays[:MAX_SWAP_TICK_ARRAYS]:
            if tick_array is None:
                break
            self.sequence.append(tick_array)

        if not self.sequence:
            raise InsufficientTickArraysError("first tick array must be initialized")

        self.touched = [False] * len(self.sequence)
        self.start_array_index = TickArrayIndex.from_tick_index(
            self.sequence[0].start_tick_index, tick_spacing
        ).array_index

    def __len__(self) -> int:
        return len(self.sequence)

    def check_tick_array_0(self, tick_current_index: int) -> None:
        """첫 배열이 현재 틱(b->a는 + tick_spacing)을 포함하는지 검사"""
        shift = 0 if self.a_to_b else self.tick_spacing
        start = self.sequence[0].start_tick_index
        if not self._is_in_array_range(start, tick_current_index + shift):
            raise InsufficientTickArraysError(
                f"tick array starting at {start} does not contain current tick {tick_current_index} "
                f"(a_to_b={self.a_to_b})"
            )

    def touched_start_tick_indexes(self, min_size: int = MAX_SWAP_TICK_ARRAYS) -> Tuple[int, ...]:
        """탐색 중 접근한 배열의 시작 틱 (min_size까지 마지막 값으로 채움)"""
        result = [
            tick_array.start_tick_index
            for tick_array, touched in zip(self.sequence, self.touched)
            if touched
        ]
        if not result:
            return ()
        result.extend([result[-1]] * (min_size - len(result)))
        return tuple(result)

    def get_tick(self, tick: int) -> TickData:
        target = TickArrayIndex.from_tick_index(tick, self.tick_spacing)
        if not self._is_array_index_in_bounds(target):
            raise InsufficientTickArraysError(f"tick {tick} is out of bounds for this tick array sequence")

        local_index = self._local_array_index(target.array_index)
        tick_array = self.sequence[local_index]
        self.touched[local_index] = True

        if not self._is_in_array_range(tick_array.start_tick_index, tick):
            raise InsufficientTickArraysError(
                f"tick array {local_index} (start {tick_array.start_tick_index}) is unexpected for this sequence"
            )
        return tick_array.ticks[target.offset_index]

    def find_next_initialized_tick_index(self, tick_current_index: int) -> Tuple[int, Optional[TickData]]:
        """스왑 방향으로 다음 초기화된 틱

        a->b는 현재 틱부터 왼쪽으로(현재 틱 포함), b->a는 현재 틱 + tick_spacing부터 오른쪽으로.
        시퀀스 안에 없으면 마지막 배열 경계 틱과 None을 반환합니다.

        Raises:
            InsufficientTickArraysError: 탐색 시작 지점이 시퀀스 밖인 경우
        """
        search_tick = tick_current_index if self.a_to_b else tick_current_index + self.tick_spacing
        current = TickArrayIndex.from_tick_index(search_tick, self.tick_spacing)

        if not self._is_array_index_in_bounds(current):
            raise InsufficientTickArraysError(
                f"swap traversed too many tick arrays: out of bounds at tick {current.to_tick_index()}"
            )

        while self._is_array_index_in_bounds(current):
            tick_data = self.get_tick(current.to_tick_index())
            if tick_data.initialized:
                return current.to_tick_index(), tick_data
            if self.a_to_b:
                current = current.to_prev_initializable_tick_index()
            else:
                current = current.to_next_initializable_tick_index()

        if self.a_to_b:
            boundary = current.to_tick_index() + self.tick_spacing
        else:
            boundary = current.to_tick_index() - 1
        boundary = max(min(boundary, MAX_TICK), MIN_TICK)
        logger.debug("no initialized tick left in sequence, stopping at array boundary %d", boundary)
        return boundary, None

    def _local_array_index(self, array_index: int) -> int:
        if self.a_to_b:
            return self.start_array_index - array_index
        return array_index - self.start_array_index

    def _is_array_index_in_bounds(self, index: TickArrayIndex) -> bool:
        local_index = self._local_array_index(index.array_index)
        return 0 <= local_index < len(self.sequence)

    def _is_in_array_range(self, start_tick_index: int, tick: int) -> bool:
        upper_bound = start_tick_index + self.tick_spacing * TICK_ARRAY_SIZE
        return start_tick_index <= tick < upper_bound
