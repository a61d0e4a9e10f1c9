"""
Whirlpool 데이터 타입 정의

계정 조회 계층(account fetcher)이 넘겨주는 풀/틱 배열/민트 데이터를 Python dataclass로 정의.
모든 숫자 필드는 온체인 정밀도를 위해 int 타입 사용.
from_dict는 camelCase 키와 문자열로 인코딩된 정수를 모두 받습니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..constants import (
    BPS_DENOMINATOR,
    MAX_FEE_BASIS_POINTS,
    NUM_REWARDS,
    TICK_ARRAY_SIZE,
    U64_MAX,
)
from ..errors import InvalidInputError

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"


class SlippageStrategy(str, Enum):
    """슬리피지 모델

    - AMOUNT: 추정 수량에 직접 비율 적용 (tick 기반 포지션 분류)
    - PRICE_BOUND: 슬리피지만큼 이동한 가격에서 quote를 다시 계산 (strict 가격 기반 분류)
    """
    AMOUNT = "amount"
    PRICE_BOUND = "price_bound"


@dataclass(frozen=True)
class Percentage:
    """슬리피지 허용치 (numerator / denominator)"""
    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator <= 0:
            raise InvalidInputError(f"denominator must be positive: {self.denominator}")
        if self.numerator < 0:
            raise InvalidInputError(f"numerator must not be negative: {self.numerator}")

    @classmethod
    def from_fraction(cls, numerator: int, denominator: int) -> "Percentage":
        return cls(int(numerator), int(denominator))

    @classmethod
    def from_bps(cls, bps: int) -> "Percentage":
        return cls(int(bps), BPS_DENOMINATOR)

    @classmethod
    def zero(cls) -> "Percentage":
        return cls(0, 1)

    @classmethod
    def from_dict(cls, data: dict) -> "Percentage":
        if "bps" in data:
            return cls.from_bps(int(data["bps"]))
        return cls(int(data["numerator"]), int(data["denominator"]))

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    def __str__(self) -> str:
        return f"{self.numerator * 100 / self.denominator:g}%"


@dataclass(frozen=True)
class TransferFee:
    """Token-2022 transfer fee (한 에폭 구간)

    - fee_bps: 전송 수수료 (basis points, 최대 10000)
    - max_fee: 전송 1회당 최대 수수료 (최소 단위)
    - epoch: 이 수수료가 적용되기 시작하는 에폭
    """
    fee_bps: int
    max_fee: int
    epoch: int = 0

    def __post_init__(self):
        if not 0 <= self.fee_bps <= MAX_FEE_BASIS_POINTS:
            raise InvalidInputError(f"transfer fee bps out of range: {self.fee_bps}")
        if not 0 <= self.max_fee <= U64_MAX:
            raise InvalidInputError(f"maximum fee out of range: {self.max_fee}")

    @classmethod
    def from_dict(cls, data: dict) -> "TransferFee":
        return cls(
            fee_bps=int(data["transferFeeBasisPoints"]),
            max_fee=int(data["maximumFee"]),
            epoch=int(data.get("epoch", 0)),
        )


@dataclass(frozen=True)
class TransferFeeConfig:
    """민트의 transfer fee 확장 (older/newer 두 구간)"""
    older_transfer_fee: TransferFee
    newer_transfer_fee: TransferFee

    def epoch_fee(self, epoch: int) -> TransferFee:
        if epoch >= self.newer_transfer_fee.epoch:
            return self.newer_transfer_fee
        return self.older_transfer_fee

    @classmethod
    def single(cls, fee_bps: int, max_fee: int) -> "TransferFeeConfig":
        """에폭과 무관하게 같은 수수료를 쓰는 설정"""
        fee = TransferFee(fee_bps, max_fee, 0)
        return cls(older_transfer_fee=fee, newer_transfer_fee=fee)

    @classmethod
    def from_dict(cls, data: dict) -> "TransferFeeConfig":
        return cls(
            older_transfer_fee=TransferFee.from_dict(data["olderTransferFee"]),
            newer_transfer_fee=TransferFee.from_dict(data["newerTransferFee"]),
        )


@dataclass
class MintInfo:
    """토큰 민트 정보"""
    address: str
    decimals: int = 0
    token_program: str = TOKEN_PROGRAM_ID
    transfer_fee_config: Optional[TransferFeeConfig] = None

    def transfer_fee(self, epoch: int) -> Optional[TransferFee]:
        if self.transfer_fee_config is None:
            return None
        return self.transfer_fee_config.epoch_fee(epoch)

    @classmethod
    def from_dict(cls, data: dict) -> "MintInfo":
        config = data.get("transferFeeConfig")
        return cls(
            address=data["address"],
            decimals=int(data.get("decimals", 0)),
            token_program=data.get("tokenProgram", TOKEN_PROGRAM_ID),
            transfer_fee_config=TransferFeeConfig.from_dict(config) if config else None,
        )


@dataclass
class TokenExtensionContext:
    """풀의 두 민트와 현재 에폭

    transfer fee 계산은 모두 이 컨텍스트를 통해 이뤄집니다.
    """
    mint_a: MintInfo
    mint_b: MintInfo
    current_epoch: int = 0

    @property
    def transfer_fee_a(self) -> Optional[TransferFee]:
        return self.mint_a.transfer_fee(self.current_epoch)

    @property
    def transfer_fee_b(self) -> Optional[TransferFee]:
        return self.mint_b.transfer_fee(self.current_epoch)

    @classmethod
    def without_extensions(cls, mint_a: str, mint_b: str) -> "TokenExtensionContext":
        return cls(mint_a=MintInfo(mint_a), mint_b=MintInfo(mint_b))

    @classmethod
    def from_dict(cls, data: dict) -> "TokenExtensionContext":
        return cls(
            mint_a=MintInfo.from_dict(data["mintA"]),
            mint_b=MintInfo.from_dict(data["mintB"]),
            current_epoch=int(data.get("currentEpoch", 0)),
        )


@dataclass
class TickData:
    """틱 하나의 상태

    - liquidity_net: 틱 크로싱 시 유동성 변화량 (ΔL, 부호 있음)
    - liquidity_gross: 해당 틱을 경계로 하는 총 유동성
    - fee_growth_outside_a/b: 틱 바깥쪽 누적 수수료 (Q64.64)
    """
    initialized: bool = False
    liquidity_net: int = 0
    liquidity_gross: int = 0
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    reward_growths_outside: List[int] = field(default_factory=lambda: [0] * NUM_REWARDS)

    @classmethod
    def from_dict(cls, data: dict) -> "TickData":
        rewards = [int(v) for v in data.get("rewardGrowthsOutside", [0] * NUM_REWARDS)]
        return cls(
            initialized=bool(data.get("initialized", False)),
            liquidity_net=int(data.get("liquidityNet", 0)),
            liquidity_gross=int(data.get("liquidityGross", 0)),
            fee_growth_outside_a=int(data.get("feeGrowthOutsideA", 0)),
            fee_growth_outside_b=int(data.get("feeGrowthOutsideB", 0)),
            reward_growths_outside=rewards,
        )


@dataclass
class TickArrayData:
    """틱 배열 (TICK_ARRAY_SIZE개의 연속된 틱)"""
    start_tick_index: int
    ticks: List[TickData] = field(default_factory=lambda: [TickData() for _ in range(TICK_ARRAY_SIZE)])

    def __post_init__(self):
        if len(self.ticks) != TICK_ARRAY_SIZE:
            raise InvalidInputError(
                f"tick array must hold {TICK_ARRAY_SIZE} ticks, got {len(self.ticks)}"
            )

    @classmethod
    def with_ticks(
        cls,
        start_tick_index: int,
        tick_spacing: int,
        ticks: Dict[int, TickData]
    ) -> "TickArrayData":
        """틱 인덱스 -> TickData 매핑으로 배열 생성 (나머지는 미초기화)"""
        array = cls(start_tick_index)
        for tick_index, tick in ticks.items():
            offset, remainder = divmod(tick_index - start_tick_index, tick_spacing)
            if remainder != 0 or not 0 <= offset < TICK_ARRAY_SIZE:
                raise InvalidInputError(
                    f"tick {tick_index} does not belong to array starting at {start_tick_index}"
                )
            array.ticks[offset] = tick
        return array

    @classmethod
    def from_dict(cls, data: dict) -> "TickArrayData":
        return cls(
            start_tick_index=int(data["startTickIndex"]),
            ticks=[TickData.from_dict(t) for t in data["ticks"]],
        )


@dataclass
class WhirlpoolRewardInfo:
    """풀 리워드 슬롯

    - emissions_per_second_x64: 초당 리워드 방출량 (Q64.64)
    - growth_global_x64: 유동성 단위당 누적 리워드 (Q64.64)
    """
    mint: str = ""
    emissions_per_second_x64: int = 0
    growth_global_x64: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "WhirlpoolRewardInfo":
        return cls(
            mint=data.get("mint", ""),
            emissions_per_second_x64=int(data.get("emissionsPerSecondX64", 0)),
            growth_global_x64=int(data.get("growthGlobalX64", 0)),
        )


@dataclass
class PoolData:
    """Whirlpool 상태

    Global State:
    - tick_current_index: 현재 틱 인덱스
    - sqrt_price: 현재 √가격 (Q64.64)
    - liquidity: 현재 가격에서 활성화된 총 유동성
    - fee_rate: 스왑 수수료 (1/100 bps 단위, 3000 = 0.3%)
    - protocol_fee_rate: 프로토콜 몫 (bps 단위)
    """
    tick_current_index: int
    sqrt_price: int
    tick_spacing: int
    fee_rate: int
    token_mint_a: str
    token_mint_b: str
    liquidity: int = 0
    protocol_fee_rate: int = 0
    fee_growth_global_a: int = 0
    fee_growth_global_b: int = 0
    reward_last_updated_timestamp: int = 0
    reward_infos: List[WhirlpoolRewardInfo] = field(
        default_factory=lambda: [WhirlpoolRewardInfo() for _ in range(NUM_REWARDS)]
    )

    @classmethod
    def from_dict(cls, data: dict) -> "PoolData":
        return cls(
            tick_current_index=int(data["tickCurrentIndex"]),
            sqrt_price=int(data["sqrtPrice"]),
            tick_spacing=int(data["tickSpacing"]),
            fee_rate=int(data["feeRate"]),
            token_mint_a=data["tokenMintA"],
            token_mint_b=data["tokenMintB"],
            liquidity=int(data.get("liquidity", 0)),
            protocol_fee_rate=int(data.get("protocolFeeRate", 0)),
            fee_growth_global_a=int(data.get("feeGrowthGlobalA", 0)),
            fee_growth_global_b=int(data.get("feeGrowthGlobalB", 0)),
            reward_last_updated_timestamp=int(data.get("rewardLastUpdatedTimestamp", 0)),
            reward_infos=[WhirlpoolRewardInfo.from_dict(r) for r in data.get("rewardInfos", [])]
            or [WhirlpoolRewardInfo() for _ in range(NUM_REWARDS)],
        )


@dataclass
class PositionRewardInfo:
    growth_inside_checkpoint: int = 0
    amount_owed: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "PositionRewardInfo":
        return cls(
            growth_inside_checkpoint=int(data.get("growthInsideCheckpoint", 0)),
            amount_owed=int(data.get("amountOwed", 0)),
        )


@dataclass
class PositionData:
    """Position-Indexed State

    - fee_growth_checkpoint_a/b: 마지막 업데이트 시점의 범위 내 fee growth
    - fee_owed_a/b: 이미 적립된 미수령 수수료
    """
    tick_lower_index: int
    tick_upper_index: int
    liquidity: int
    fee_growth_checkpoint_a: int = 0
    fee_owed_a: int = 0
    fee_growth_checkpoint_b: int = 0
    fee_owed_b: int = 0
    reward_infos: List[PositionRewardInfo] = field(
        default_factory=lambda: [PositionRewardInfo() for _ in range(NUM_REWARDS)]
    )

    @classmethod
    def from_dict(cls, data: dict) -> "PositionData":
        return cls(
            tick_lower_index=int(data["tickLowerIndex"]),
            tick_upper_index=int(data["tickUpperIndex"]),
            liquidity=int(data["liquidity"]),
            fee_growth_checkpoint_a=int(data.get("feeGrowthCheckpointA", 0)),
            fee_owed_a=int(data.get("feeOwedA", 0)),
            fee_growth_checkpoint_b=int(data.get("feeGrowthCheckpointB", 0)),
            fee_owed_b=int(data.get("feeOwedB", 0)),
            reward_infos=[PositionRewardInfo.from_dict(r) for r in data.get("rewardInfos", [])]
            or [PositionRewardInfo() for _ in range(NUM_REWARDS)],
        )
