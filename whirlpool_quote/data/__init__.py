"""
Data layer for the Whirlpool quote engine

계정 조회 계층이 넘겨주는 풀/틱 배열/민트/포지션 데이터 타입 정의
"""

from .types import (
    Percentage,
    SlippageStrategy,
    TransferFee,
    TransferFeeConfig,
    MintInfo,
    TokenExtensionContext,
    TickData,
    TickArrayData,
    WhirlpoolRewardInfo,
    PoolData,
    PositionRewardInfo,
    PositionData,
)
