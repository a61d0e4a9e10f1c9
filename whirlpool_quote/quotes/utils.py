"""
Quote 공통 헬퍼

- 포지션 틱 범위 / 민트 검증
- 슬리피지 기본값 해석 (config.settings)
- 전략별 포지션 상태 규칙 선택
- 실패한 quote를 한 번만 로깅하는 데코레이터
"""

import functools
import logging
from typing import Optional, Union

from ..config import settings
from ..data.types import Percentage, PoolData, SlippageStrategy
from ..errors import InvalidInputError, QuoteError
from ..math.position_math import PositionStatus, get_position_status, get_strict_position_status
from ..math.tick_utils import check_tick_in_bounds, is_tick_initializable

logger = logging.getLogger(__name__)


def check_position_range(tick_lower_index: int, tick_upper_index: int, tick_spacing: Optional[int] = None) -> None:
    """포지션 틱 범위 검증

    Raises:
        OutOfRangeError: 틱이 [MIN_TICK, MAX_TICK] 밖인 경우
        InvalidInputError: tick_lower >= tick_upper 이거나 tick spacing에 맞지 않는 경우
    """
    check_tick_in_bounds(tick_lower_index, "tick_lower_index")
    check_tick_in_bounds(tick_upper_index, "tick_upper_index")
    if tick_lower_index >= tick_upper_index:
        raise InvalidInputError(
            f"tick_lower_index must be less than tick_upper_index: {tick_lower_index} >= {tick_upper_index}"
        )
    if tick_spacing is not None:
        for tick in (tick_lower_index, tick_upper_index):
            if not is_tick_initializable(tick, tick_spacing):
                raise InvalidInputError(f"tick {tick} is not initializable with tick spacing {tick_spacing}")


def is_token_a(token_mint: str, pool: PoolData) -> bool:
    """민트가 풀의 token A인지 (둘 다 아니면 InvalidInputError)"""
    if token_mint == pool.token_mint_a:
        return True
    if token_mint == pool.token_mint_b:
        return False
    raise InvalidInputError(
        f"token mint {token_mint} does not match any tokens in the pool "
        f"({pool.token_mint_a}, {pool.token_mint_b})"
    )


def resolve_slippage(slippage_tolerance: Optional[Percentage]) -> Percentage:
    if slippage_tolerance is None:
        return settings.default_slippage()
    return slippage_tolerance


def resolve_strategy(strategy: Optional[Union[SlippageStrategy, str]]) -> SlippageStrategy:
    if isinstance(strategy, SlippageStrategy):
        return strategy
    return settings.slippage_strategy(strategy)


def position_status_for(
    strategy: SlippageStrategy,
    pool: PoolData,
    tick_lower_index: int,
    tick_upper_index: int
) -> PositionStatus:
    """수량 비율 전략은 tick 기반, 가격 경계 전략은 strict 가격 기반"""
    if strategy == SlippageStrategy.AMOUNT:
        return get_position_status(pool.tick_current_index, tick_lower_index, tick_upper_index)
    return get_strict_position_status(pool.sqrt_price, tick_lower_index, tick_upper_index)


def log_quote_errors(name: str):
    """QuoteError를 INFO로 남기고 그대로 다시 던짐"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except QuoteError as e:
                logger.info("%s failed: %r", name, e)
                raise
        return wrapper
    return decorator
