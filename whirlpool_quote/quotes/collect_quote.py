"""
Collect Quote - 포지션의 미수령 수수료 / 리워드

fee growth와 reward growth는 모두 "유동성 1단위당 누적량 (Q64.64)"이며
범위 내 growth에서 포지션 체크포인트를 뺀 만큼 유동성에 곱해 적립량을 구합니다.
수령액은 민트의 transfer fee를 뺀 실제 수령 금액입니다.
"""

import logging
from typing import Optional, Sequence

from ..constants import NUM_REWARDS
from ..data.types import MintInfo, PoolData, PositionData, TickData, TokenExtensionContext
from ..math.fee_math import calculate_uncollected_fees, fee_growth_inside, next_reward_growth_global
from ..math.fixed_point import check_u64
from ..math.transfer_fee import calculate_transfer_fee_excluded_amount
from .results import CollectFeesQuote, CollectRewardQuote, CollectRewardsQuote
from .utils import log_quote_errors

logger = logging.getLogger(__name__)


@log_quote_errors("collect fees quote")
def collect_fees_quote(
    pool: PoolData,
    position: PositionData,
    tick_lower: TickData,
    tick_upper: TickData,
    token_extension_ctx: TokenExtensionContext
) -> CollectFeesQuote:
    """포지션에서 수령 가능한 수수료

    Args:
        pool: 풀 상태 (현재 틱, 전역 fee growth)
        position: 포지션 상태 (체크포인트, 적립된 fee_owed)
        tick_lower: 포지션 하한 틱 데이터
        tick_upper: 포지션 상한 틱 데이터
        token_extension_ctx: 민트별 transfer fee 정보

    Returns:
        CollectFeesQuote (transfer fee 제외)
    """
    inside_a = fee_growth_inside(
        position.tick_lower_index,
        position.tick_upper_index,
        pool.tick_current_index,
        pool.fee_growth_global_a,
        tick_lower.fee_growth_outside_a,
        tick_upper.fee_growth_outside_a,
    )
    inside_b = fee_growth_inside(
        position.tick_lower_index,
        position.tick_upper_index,
        pool.tick_current_index,
        pool.fee_growth_global_b,
        tick_lower.fee_growth_outside_b,
        tick_upper.fee_growth_outside_b,
    )

    owed_a = position.fee_owed_a + calculate_uncollected_fees(
        position.liquidity, inside_a, position.fee_growth_checkpoint_a
    )
    owed_b = position.fee_owed_b + calculate_uncollected_fees(
        position.liquidity, inside_b, position.fee_growth_checkpoint_b
    )

    fee_a = calculate_transfer_fee_excluded_amount(
        token_extension_ctx.transfer_fee_a, check_u64(owed_a, "fee owed A")
    )
    fee_b = calculate_transfer_fee_excluded_amount(
        token_extension_ctx.transfer_fee_b, check_u64(owed_b, "fee owed B")
    )
    logger.debug("collect fees: owed=(%d, %d) after transfer fee=(%d, %d)", owed_a, owed_b, fee_a.amount, fee_b.amount)

    return CollectFeesQuote(
        fee_owed_a=fee_a.amount,
        fee_owed_b=fee_b.amount,
        transfer_fee_a=fee_a.fee,
        transfer_fee_b=fee_b.fee,
    )


@log_quote_errors("collect rewards quote")
def collect_rewards_quote(
    pool: PoolData,
    position: PositionData,
    tick_lower: TickData,
    tick_upper: TickData,
    current_timestamp: int,
    reward_mints: Optional[Sequence[Optional[MintInfo]]] = None,
    current_epoch: int = 0
) -> CollectRewardsQuote:
    """포지션에서 수령 가능한 리워드 (슬롯 3개)

    마지막 업데이트 이후 경과 시간만큼 전역 reward growth를 진행시킨 뒤 계산합니다.

    Args:
        pool: 풀 상태
        position: 포지션 상태
        tick_lower: 포지션 하한 틱 데이터
        tick_upper: 포지션 상한 틱 데이터
        current_timestamp: 현재 시각 (unix seconds)
        reward_mints: 슬롯별 리워드 민트 정보 (transfer fee용, 없으면 None)
        current_epoch: 현재 에폭

    Returns:
        CollectRewardsQuote
    """
    reward_mints = list(reward_mints or [])
    reward_mints.extend([None] * (NUM_REWARDS - len(reward_mints)))
    time_delta = current_timestamp - pool.reward_last_updated_timestamp

    rewards = []
    for i in range(NUM_REWARDS):
        reward_info = pool.reward_infos[i]
        position_reward = position.reward_infos[i]

        growth_global = next_reward_growth_global(
            reward_info.growth_global_x64,
            reward_info.emissions_per_second_x64,
            pool.liquidity,
            time_delta,
        )
        growth_inside = fee_growth_inside(
            position.tick_lower_index,
            position.tick_upper_index,
            pool.tick_current_index,
            growth_global,
            tick_lower.reward_growths_outside[i],
            tick_upper.reward_growths_outside[i],
        )
        owed = position_reward.amount_owed + calculate_uncollected_fees(
            position.liquidity, growth_inside, position_reward.growth_inside_checkpoint
        )

        mint = reward_mints[i]
        transfer_fee = mint.transfer_fee(current_epoch) if mint is not None else None
        reward = calculate_transfer_fee_excluded_amount(transfer_fee, check_u64(owed, f"reward {i} owed"))
        rewards.append(CollectRewardQuote(rewards_owed=reward.amount, transfer_fee=reward.fee))

    logger.debug("collect rewards: %s", [r.rewards_owed for r in rewards])
    return CollectRewardsQuote(rewards=rewards)
