"""
Transfer Fee Math - Token-2022 전송 수수료 계산

Token-2022 민트는 전송할 때마다 수수료를 뗄 수 있습니다.
- fee-excluded: 보낸 금액(included)에서 수수료를 뺀 실제 수령액
- fee-included: 수령액(excluded)을 맞추기 위해 보내야 하는 금액

핵심 공식:
    fee(amount) = min(ceil(amount * bps / 10000), max_fee)
    excluded = amount - fee(amount)
    included = ceil(amount * 10000 / (10000 - bps))  (수수료가 max_fee에 걸리면 amount + max_fee)

transfer fee 확장이 없는 민트는 수수료 0으로 처리합니다.
"""

from typing import NamedTuple, Optional

from ..constants import BPS_DENOMINATOR, MAX_FEE_BASIS_POINTS
from ..data.types import TransferFee
from .fixed_point import check_u64, div_round_up


class TransferFeeAmount(NamedTuple):
    """수수료 적용 후 수량과 수수료"""
    amount: int
    fee: int


def calculate_transfer_fee(transfer_fee: Optional[TransferFee], amount: int) -> int:
    """amount를 전송할 때 떼이는 수수료

    Args:
        transfer_fee: 현재 에폭의 transfer fee (없으면 None)
        amount: 전송 금액 (수수료 포함)

    Returns:
        수수료 (max_fee 이하)
    """
    if transfer_fee is None or transfer_fee.fee_bps == 0 or amount == 0:
        return 0
    raw_fee = div_round_up(amount * transfer_fee.fee_bps, BPS_DENOMINATOR)
    return min(raw_fee, transfer_fee.max_fee)


def calculate_transfer_fee_excluded_amount(
    transfer_fee: Optional[TransferFee],
    transfer_fee_included_amount: int
) -> TransferFeeAmount:
    """보낸 금액에서 실제 수령액 계산"""
    fee = calculate_transfer_fee(transfer_fee, transfer_fee_included_amount)
    return TransferFeeAmount(transfer_fee_included_amount - fee, fee)


def calculate_transfer_fee_included_amount(
    transfer_fee: Optional[TransferFee],
    transfer_fee_excluded_amount: int
) -> TransferFeeAmount:
    """수령액을 맞추기 위해 보내야 하는 금액 계산

    Args:
        transfer_fee: 현재 에폭의 transfer fee (없으면 None)
        transfer_fee_excluded_amount: 목표 수령액

    Returns:
        (보낼 금액, 수수료)

    Raises:
        AmountOverflowError: 보낼 금액이 u64를 넘는 경우
    """
    amount = transfer_fee_excluded_amount
    if transfer_fee is None or transfer_fee.fee_bps == 0 or amount == 0:
        return TransferFeeAmount(amount, 0)

    if transfer_fee.fee_bps == MAX_FEE_BASIS_POINTS:
        # 100% 수수료면 항상 max_fee가 붙음
        included = amount + transfer_fee.max_fee
    else:
        raw_included = div_round_up(amount * BPS_DENOMINATOR, BPS_DENOMINATOR - transfer_fee.fee_bps)
        if raw_included - amount >= transfer_fee.max_fee:
            included = amount + transfer_fee.max_fee
        else:
            included = raw_included

    check_u64(included, "transfer fee included amount")
    return TransferFeeAmount(included, included - amount)
