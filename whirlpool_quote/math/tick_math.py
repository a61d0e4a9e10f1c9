"""
Tick Math - Tick ↔ Sqrt Price 변환

Whirlpool 프로그램의 틱 수학 함수들. 온체인 프로그램과 동일한 정밀도로 구현.

References:
- Whirlpool program: math/tick_math.rs
- Whirlpool core: math/tick.rs

핵심 공식:
    price = 1.0001^tick
    sqrtPriceX64 = sqrt(price) * 2^64
    tick = floor(log_sqrt(1.0001)(sqrtPrice))

양수 틱은 Q96 상수로 곱해 나가다 마지막에 Q64로 내리고(>> 32),
음수 틱은 역수 상수로 처음부터 Q64에서 계산합니다.
"""

from ..constants import MIN_TICK, MAX_TICK, MIN_SQRT_PRICE, MAX_SQRT_PRICE
from ..errors import OutOfRangeError
from .fixed_point import mul_shift_right

# log_b(2) (b = sqrt(1.0001)), X32
LOG_B_2_X32: int = 59543866431248
BIT_PRECISION: int = 14
# 0.01
LOG_B_P_ERR_MARGIN_LOWER_X64: int = 184467440737095516
# 2^-precision / log_2_b + 0.01
LOG_B_P_ERR_MARGIN_UPPER_X64: int = 15793534762490258745


def tick_index_to_sqrt_price(tick: int) -> int:
    """틱에서 sqrtPriceX64 계산

    틱의 비트마다 sqrt(1.0001^(2^k)) 상수를 곱합니다 (O(log tick)).

    Args:
        tick: 틱 인덱스 (-443636 ~ 443636)

    Returns:
        sqrtPriceX64 (Q64.64 형식)

    Raises:
        OutOfRangeError: 틱이 유효 범위를 벗어난 경우
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise OutOfRangeError(f"tick out of range: {tick} (range: {MIN_TICK} ~ {MAX_TICK})")

    if tick > 0:
        return _sqrt_price_positive_tick(tick)
    return _sqrt_price_negative_tick(tick)


def _sqrt_price_positive_tick(tick: int) -> int:
    ratio = 79232123823359799118286999567 if tick & 0x1 else 79228162514264337593543950336

    if tick & 0x2:
        ratio = mul_shift_right(ratio, 79236085330515764027303304731, 96)
    if tick & 0x4:
        ratio = mul_shift_right(ratio, 79244008939048815603706035061, 96)
    if tick & 0x8:
        ratio = mul_shift_right(ratio, 79259858533276714757314932305, 96)
    if tick & 0x10:
        ratio = mul_shift_right(ratio, 79291567232598584799939703904, 96)
    if tick & 0x20:
        ratio = mul_shift_right(ratio, 79355022692464371645785046466, 96)
    if tick & 0x40:
        ratio = mul_shift_right(ratio, 79482085999252804386437311141, 96)
    if tick & 0x80:
        ratio = mul_shift_right(ratio, 79736823300114093921829183326, 96)
    if tick & 0x100:
        ratio = mul_shift_right(ratio, 80248749790819932309965073892, 96)
    if tick & 0x200:
        ratio = mul_shift_right(ratio, 81282483887344747381513967011, 96)
    if tick & 0x400:
        ratio = mul_shift_right(ratio, 83390072131320151908154831281, 96)
    if tick & 0x800:
        ratio = mul_shift_right(ratio, 87770609709833776024991924138, 96)
    if tick & 0x1000:
        ratio = mul_shift_right(ratio, 97234110755111693312479820773, 96)
    if tick & 0x2000:
        ratio = mul_shift_right(ratio, 119332217159966728226237229890, 96)
    if tick & 0x4000:
        ratio = mul_shift_right(ratio, 179736315981702064433883588727, 96)
    if tick & 0x8000:
        ratio = mul_shift_right(ratio, 407748233172238350107850275304, 96)
    if tick & 0x10000:
        ratio = mul_shift_right(ratio, 2098478828474011932436660412517, 96)
    if tick & 0x20000:
        ratio = mul_shift_right(ratio, 55581415166113811149459800483533, 96)
    if tick & 0x40000:
        ratio = mul_shift_right(ratio, 38992368544603139932233054999993551, 96)

    # Q96 -> Q64
    return ratio >> 32


def _sqrt_price_negative_tick(tick: int) -> int:
    abs_tick = abs(tick)

    ratio = 18445821805675392311 if abs_tick & 0x1 else 18446744073709551616

    if abs_tick & 0x2:
        ratio = mul_shift_right(ratio, 18444899583751176498, 64)
    if abs_tick & 0x4:
        ratio = mul_shift_right(ratio, 18443055278223354162, 64)
    if abs_tick & 0x8:
        ratio = mul_shift_right(ratio, 18439367220385604838, 64)
    if abs_tick & 0x10:
        ratio = mul_shift_right(ratio, 18431993317065449817, 64)
    if abs_tick & 0x20:
        ratio = mul_shift_right(ratio, 18417254355718160513, 64)
    if abs_tick & 0x40:
        ratio = mul_shift_right(ratio, 18387811781193591352, 64)
    if abs_tick & 0x80:
        ratio = mul_shift_right(ratio, 18329067761203520168, 64)
    if abs_tick & 0x100:
        ratio = mul_shift_right(ratio, 18212142134806087854, 64)
    if abs_tick & 0x200:
        ratio = mul_shift_right(ratio, 17980523815641551639, 64)
    if abs_tick & 0x400:
        ratio = mul_shift_right(ratio, 17526086738831147013, 64)
    if abs_tick & 0x800:
        ratio = mul_shift_right(ratio, 16651378430235024244, 64)
    if abs_tick & 0x1000:
        ratio = mul_shift_right(ratio, 15030750278693429944, 64)
    if abs_tick & 0x2000:
        ratio = mul_shift_right(ratio, 12247334978882834399, 64)
    if abs_tick & 0x4000:
        ratio = mul_shift_right(ratio, 8131365268884726200, 64)
    if abs_tick & 0x8000:
        ratio = mul_shift_right(ratio, 3584323654723342297, 64)
    if abs_tick & 0x10000:
        ratio = mul_shift_right(ratio, 696457651847595233, 64)
    if abs_tick & 0x20000:
        ratio = mul_shift_right(ratio, 26294789957452057, 64)
    if abs_tick & 0x40000:
        ratio = mul_shift_right(ratio, 37481735321082, 64)

    return ratio


def sqrt_price_to_tick_index(sqrt_price: int) -> int:
    """sqrtPriceX64에서 틱 계산

    결과 틱의 가격은 입력 가격을 넘지 않는 가장 큰 틱 가격입니다 (floor).

    Args:
        sqrt_price: sqrtPriceX64 (Q64.64 형식)

    Returns:
        틱 인덱스

    Raises:
        OutOfRangeError: sqrt price가 [MIN_SQRT_PRICE, MAX_SQRT_PRICE] 밖인 경우
    """
    if sqrt_price < MIN_SQRT_PRICE or sqrt_price > MAX_SQRT_PRICE:
        raise OutOfRangeError(
            f"sqrt price out of range: {sqrt_price} (range: {MIN_SQRT_PRICE} ~ {MAX_SQRT_PRICE})"
        )

    # 최상위 비트로 log2 정수부
    msb = sqrt_price.bit_length() - 1
    log2p_integer_x32 = (msb - 64) << 32

    # 64비트 정밀도로 정규화
    if msb >= 64:
        r = sqrt_price >> (msb - 63)
    else:
        r = sqrt_price << (63 - msb)

    # 로그 소수부 (제곱하면서 비트 하나씩)
    bit = 0x8000000000000000
    log2p_fraction_x64 = 0
    for _ in range(BIT_PRECISION):
        r *= r
        is_r_more_than_two = r >> 127
        r >>= 63 + is_r_more_than_two
        log2p_fraction_x64 += bit * is_r_more_than_two
        bit >>= 1

    log2p_x32 = log2p_integer_x32 + (log2p_fraction_x64 >> 32)
    logbp_x64 = log2p_x32 * LOG_B_2_X32

    tick_low = (logbp_x64 - LOG_B_P_ERR_MARGIN_LOWER_X64) >> 64
    tick_high = (logbp_x64 + LOG_B_P_ERR_MARGIN_UPPER_X64) >> 64

    if tick_low == tick_high:
        return tick_low

    # MAX_SQRT_PRICE 근처에서는 tick_high가 MAX_TICK을 넘을 수 있음
    if tick_high > MAX_TICK:
        return tick_low

    if tick_index_to_sqrt_price(tick_high) <= sqrt_price:
        return tick_high
    else:
        return tick_low


def invert_tick_index(tick: int) -> int:
    """토큰 순서를 뒤집었을 때의 틱 (B/A -> A/B)"""
    return -tick


def invert_sqrt_price(sqrt_price: int) -> int:
    """토큰 순서를 뒤집었을 때의 sqrt price (틱 단위로 근사)"""
    tick = sqrt_price_to_tick_index(sqrt_price)
    return tick_index_to_sqrt_price(invert_tick_index(tick))
