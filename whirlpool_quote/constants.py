"""
Whirlpool 상수 정의

온체인 프로그램과 동일한 정밀도를 위한 상수들:
- Q64: sqrt price 인코딩에 사용 (2^64, Q64.64)
- MIN_TICK / MAX_TICK: 지원되는 틱 범위
- MIN_SQRT_PRICE / MAX_SQRT_PRICE: 틱 범위에 대응하는 sqrt price 범위
- TICK_ARRAY_SIZE: 틱 배열 하나에 들어가는 틱 개수
"""

# Fixed-point 인코딩 상수
Q64: int = 2 ** 64
Q96: int = 2 ** 96

# 정수 범위
U64_MAX: int = 2 ** 64 - 1
U128_MAX: int = 2 ** 128 - 1
I128_MAX: int = 2 ** 127 - 1

# 틱 범위 상수
MIN_TICK: int = -443636
MAX_TICK: int = 443636

# tick_index_to_sqrt_price(MIN_TICK), tick_index_to_sqrt_price(MAX_TICK)
MIN_SQRT_PRICE: int = 4295048016
MAX_SQRT_PRICE: int = 79226673515401279992447579055

# 틱 배열
TICK_ARRAY_SIZE: int = 88
MAX_SWAP_TICK_ARRAYS: int = 3

# 이 값 이상의 tick spacing은 full range 포지션만 허용
FULL_RANGE_ONLY_TICK_SPACING_THRESHOLD: int = 32768

# 수수료 단위
# fee_rate 3000 = 0.3% (1/100 bps 단위)
FEE_RATE_MUL_VALUE: int = 1_000_000
# protocol_fee_rate 300 = 3% (bps 단위)
PROTOCOL_FEE_RATE_MUL_VALUE: int = 10_000

# Token-2022 transfer fee (bps 단위)
BPS_DENOMINATOR: int = 10_000
MAX_FEE_BASIS_POINTS: int = 10_000

# 리워드 슬롯 수
NUM_REWARDS: int = 3

# 자주 쓰는 tick spacing
TICK_SPACINGS = {
    "stable": 1,
    "low": 8,
    "standard": 64,
    "volatile": 128,
    "splash": 32896,
}
