"""
Math layer for Whirlpool Quote Engine

온체인 수준 정밀도의 수학 함수들:
- fixed_point: Q64.64 변환, u64/u128 범위 검사, wrapping 연산
- tick_math: Tick ↔ Sqrt Price 변환
- price_math: Sqrt Price ↔ human-readable 가격
- tick_utils: tick spacing 정렬, 틱 배열 경계
- position_math: 포지션 범위 상태 분류
- token_math: 유동성 ↔ 토큰 수량
- transfer_fee: Token-2022 전송 수수료
- slippage: 수량 / 가격 경계 슬리피지
- swap_math: 스왑 한 스텝
- fee_math: 범위 내 수수료 / 리워드 성장률
"""

from .fixed_point import (
    check_u64,
    check_u128,
    from_x64,
    to_x64,
)
from .tick_math import (
    tick_index_to_sqrt_price,
    sqrt_price_to_tick_index,
    invert_tick_index,
    invert_sqrt_price,
)
from .price_math import (
    sqrt_price_to_price,
    price_to_sqrt_price,
    tick_index_to_price,
    price_to_tick_index,
    price_to_initializable_tick_index,
    invert_price,
)
from .tick_utils import (
    TickRange,
    get_tick_array_start_tick_index,
    get_initializable_tick_index,
    get_next_initializable_tick_index,
    get_prev_initializable_tick_index,
    get_full_range_tick_indexes,
    is_tick_index_in_bounds,
    is_tick_initializable,
    is_full_range_only,
    order_tick_indexes,
)
from .position_math import (
    PositionStatus,
    PositionRatio,
    get_position_status,
    get_strict_position_status,
    is_position_in_range,
    position_ratio,
)
from .token_math import (
    TokenAmounts,
    get_token_a_from_liquidity,
    get_token_b_from_liquidity,
    get_liquidity_from_token_a,
    get_liquidity_from_token_b,
    get_token_amounts_from_liquidity,
)
from .transfer_fee import (
    TransferFeeAmount,
    calculate_transfer_fee_excluded_amount,
    calculate_transfer_fee_included_amount,
)
from .slippage import (
    adjust_for_slippage,
    get_slippage_bound_for_sqrt_price,
)
from .swap_math import (
    SwapStep,
    compute_swap_step,
)
