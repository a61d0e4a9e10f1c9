"""
Quote 결과 타입

모든 quote 결과는 불변(frozen) 값 객체입니다. 금액은 전부 토큰 최소 단위의 int.
to_dict는 JSON 경계(스키마 계층)에서 쓰는 camelCase 표현을 만듭니다.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class IncreaseLiquidityTransferFee:
    """예치 시 각 금액에 포함된 transfer fee"""
    deducting_from_token_max_a: int = 0
    deducting_from_token_max_b: int = 0
    deducting_from_token_est_a: int = 0
    deducting_from_token_est_b: int = 0


@dataclass(frozen=True)
class DecreaseLiquidityTransferFee:
    """출금 시 각 금액에서 빠지는 transfer fee"""
    deducted_from_token_min_a: int = 0
    deducted_from_token_min_b: int = 0
    deducted_from_token_est_a: int = 0
    deducted_from_token_est_b: int = 0


@dataclass(frozen=True)
class IncreaseLiquidityQuote:
    """유동성 예치 quote

    - token_est_a/b: 현재 가격에서 보낼 금액 (transfer fee 포함)
    - token_max_a/b: 슬리피지까지 고려한 최대 지불 금액 (transfer fee 포함)
    """
    liquidity_amount: int = 0
    token_est_a: int = 0
    token_est_b: int = 0
    token_max_a: int = 0
    token_max_b: int = 0
    transfer_fee: IncreaseLiquidityTransferFee = field(default_factory=IncreaseLiquidityTransferFee)

    @property
    def is_zero(self) -> bool:
        return self.liquidity_amount == 0 and self.token_max_a == 0 and self.token_max_b == 0

    def to_dict(self) -> dict:
        return {
            "liquidityAmount": self.liquidity_amount,
            "tokenEstA": self.token_est_a,
            "tokenEstB": self.token_est_b,
            "tokenMaxA": self.token_max_a,
            "tokenMaxB": self.token_max_b,
            "transferFee": {
                "deductingFromTokenMaxA": self.transfer_fee.deducting_from_token_max_a,
                "deductingFromTokenMaxB": self.transfer_fee.deducting_from_token_max_b,
                "deductingFromTokenEstA": self.transfer_fee.deducting_from_token_est_a,
                "deductingFromTokenEstB": self.transfer_fee.deducting_from_token_est_b,
            },
        }


@dataclass(frozen=True)
class DecreaseLiquidityQuote:
    """유동성 출금 quote

    - token_est_a/b: 현재 가격에서 받을 금액 (transfer fee 제외)
    - token_min_a/b: 슬리피지까지 고려한 최소 수령 금액 (transfer fee 제외)
    """
    liquidity_amount: int = 0
    token_est_a: int = 0
    token_est_b: int = 0
    token_min_a: int = 0
    token_min_b: int = 0
    transfer_fee: DecreaseLiquidityTransferFee = field(default_factory=DecreaseLiquidityTransferFee)

    def to_dict(self) -> dict:
        return {
            "liquidityAmount": self.liquidity_amount,
            "tokenEstA": self.token_est_a,
            "tokenEstB": self.token_est_b,
            "tokenMinA": self.token_min_a,
            "tokenMinB": self.token_min_b,
            "transferFee": {
                "deductedFromTokenMinA": self.transfer_fee.deducted_from_token_min_a,
                "deductedFromTokenMinB": self.transfer_fee.deducted_from_token_min_b,
                "deductedFromTokenEstA": self.transfer_fee.deducted_from_token_est_a,
                "deductedFromTokenEstB": self.transfer_fee.deducted_from_token_est_b,
            },
        }


@dataclass(frozen=True)
class SwapTransferFee:
    deducting_from_estimated_amount_in: int = 0
    deducted_from_estimated_amount_out: int = 0


@dataclass(frozen=True)
class SwapQuote:
    """스왑 quote

    - amount: 지정 수량 (입력 지정이면 보낼 금액, 출력 지정이면 받을 금액)
    - other_amount_threshold: 슬리피지 적용 후 반대쪽 한도
      (입력 지정이면 최소 수령, 출력 지정이면 최대 지불)
    - estimated_amount_in: transfer fee 포함 입력 추정
    - estimated_amount_out: transfer fee 제외 출력 추정
    - tick_array_start_indexes: 스왑 명령에 넘길 틱 배열 3개의 시작 틱
    """
    amount: int
    other_amount_threshold: int
    sqrt_price_limit: int
    amount_specified_is_input: bool
    a_to_b: bool
    estimated_amount_in: int
    estimated_amount_out: int
    estimated_end_tick_index: int
    estimated_end_sqrt_price: int
    estimated_fee_amount: int
    estimated_protocol_fee_amount: int = 0
    estimated_fee_growth_global_input: int = 0
    tick_array_start_indexes: Tuple[int, ...] = ()
    transfer_fee: SwapTransferFee = field(default_factory=SwapTransferFee)

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "otherAmountThreshold": self.other_amount_threshold,
            "sqrtPriceLimit": self.sqrt_price_limit,
            "amountSpecifiedIsInput": self.amount_specified_is_input,
            "aToB": self.a_to_b,
            "estimatedAmountIn": self.estimated_amount_in,
            "estimatedAmountOut": self.estimated_amount_out,
            "estimatedEndTickIndex": self.estimated_end_tick_index,
            "estimatedEndSqrtPrice": self.estimated_end_sqrt_price,
            "estimatedFeeAmount": self.estimated_fee_amount,
            "estimatedProtocolFeeAmount": self.estimated_protocol_fee_amount,
            "estimatedFeeGrowthGlobalInput": self.estimated_fee_growth_global_input,
            "tickArrayStartIndexes": list(self.tick_array_start_indexes),
            "transferFee": {
                "deductingFromEstimatedAmountIn": self.transfer_fee.deducting_from_estimated_amount_in,
                "deductedFromEstimatedAmountOut": self.transfer_fee.deducted_from_estimated_amount_out,
            },
        }


@dataclass(frozen=True)
class CollectFeesQuote:
    """수령 가능한 수수료 (transfer fee 제외)"""
    fee_owed_a: int
    fee_owed_b: int
    transfer_fee_a: int = 0
    transfer_fee_b: int = 0

    def to_dict(self) -> dict:
        return {
            "feeOwedA": self.fee_owed_a,
            "feeOwedB": self.fee_owed_b,
            "transferFee": {
                "deductedFromFeeOwedA": self.transfer_fee_a,
                "deductedFromFeeOwedB": self.transfer_fee_b,
            },
        }


@dataclass(frozen=True)
class CollectRewardQuote:
    rewards_owed: int = 0
    transfer_fee: int = 0


@dataclass(frozen=True)
class CollectRewardsQuote:
    """리워드 슬롯별 수령 가능량 (초기화되지 않은 슬롯은 0)"""
    rewards: List[CollectRewardQuote]

    def to_dict(self) -> dict:
        return {
            "rewards": [
                {"rewardsOwed": r.rewards_owed, "transferFee": r.transfer_fee}
                for r in self.rewards
            ],
        }
