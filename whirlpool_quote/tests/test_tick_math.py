"""
Tick Math 테스트

tick_math.py의 함수들을 테스트합니다.
온체인 프로그램의 테스트 벡터와 비교하여 정확도를 검증합니다.
"""

import pytest

from ..math.tick_math import (
    tick_index_to_sqrt_price,
    sqrt_price_to_tick_index,
    invert_tick_index,
    invert_sqrt_price,
)
from ..constants import MIN_TICK, MAX_TICK, MIN_SQRT_PRICE, MAX_SQRT_PRICE, Q64
from ..errors import OutOfRangeError

# 온체인 테스트 벡터: 틱의 각 비트별 sqrtPriceX64
POSITIVE_TICK_VECTORS = {
    0: 18446744073709551616,
    1: 18447666387855959850,
    2: 18448588748116922571,
    4: 18450433606991734263,
    8: 18454123878217468680,
    16: 18461506635090006701,
    32: 18476281010653910144,
    64: 18505865242158250041,
    128: 18565175891880433522,
    256: 18684368066214940582,
    512: 18925053041275764671,
    1024: 19415764168677886926,
    2048: 20435687552633177494,
    4096: 22639080592224303007,
    8192: 27784196929998399742,
    16384: 41848122137994986128,
    32768: 94936283578220370716,
    65536: 488590176327622479860,
    131072: 12941056668319229769860,
    262144: 9078618265828848800676189,
}

NEGATIVE_TICK_VECTORS = {
    -1: 18445821805675392311,
    -2: 18444899583751176498,
    -4: 18443055278223354162,
    -8: 18439367220385604838,
    -16: 18431993317065449817,
    -32: 18417254355718160513,
    -64: 18387811781193591352,
    -128: 18329067761203520168,
    -256: 18212142134806087854,
    -512: 17980523815641551639,
    -1024: 17526086738831147013,
    -2048: 16651378430235024244,
    -4096: 15030750278693429944,
    -8192: 12247334978882834399,
    -16384: 8131365268884726200,
    -32768: 3584323654723342297,
    -65536: 696457651847595233,
    -131072: 26294789957452057,
    -262144: 37481735321082,
}


class TestTickIndexToSqrtPrice:
    """tick_index_to_sqrt_price 테스트"""

    def test_tick_0(self):
        """틱 0에서의 sqrtPrice (price = 1)"""
        assert tick_index_to_sqrt_price(0) == Q64

    def test_positive_tick_vectors(self):
        """양수 틱 비트별 벡터"""
        for tick, expected in POSITIVE_TICK_VECTORS.items():
            assert tick_index_to_sqrt_price(tick) == expected, tick

    def test_negative_tick_vectors(self):
        """음수 틱 비트별 벡터"""
        for tick, expected in NEGATIVE_TICK_VECTORS.items():
            assert tick_index_to_sqrt_price(tick) == expected, tick

    def test_min_tick(self):
        assert tick_index_to_sqrt_price(MIN_TICK) == MIN_SQRT_PRICE

    def test_max_tick(self):
        assert tick_index_to_sqrt_price(MAX_TICK) == MAX_SQRT_PRICE

    def test_monotonic(self):
        """틱이 커지면 sqrtPrice도 커짐"""
        ticks = [MIN_TICK, -100000, -5000, -1, 0, 1, 5000, 100000, MAX_TICK]
        prices = [tick_index_to_sqrt_price(t) for t in ticks]
        assert prices == sorted(prices)
        assert len(set(prices)) == len(prices)

    def test_invalid_tick_too_low(self):
        """유효 범위를 벗어난 틱 (너무 낮음)"""
        with pytest.raises(OutOfRangeError):
            tick_index_to_sqrt_price(MIN_TICK - 1)

    def test_invalid_tick_too_high(self):
        """유효 범위를 벗어난 틱 (너무 높음)"""
        with pytest.raises(OutOfRangeError):
            tick_index_to_sqrt_price(MAX_TICK + 1)

    def test_out_of_range_is_value_error(self):
        """기존 코드의 except ValueError와 호환"""
        with pytest.raises(ValueError):
            tick_index_to_sqrt_price(MAX_TICK + 1)


class TestSqrtPriceToTickIndex:
    """sqrt_price_to_tick_index 테스트"""

    def test_min_sqrt_price(self):
        assert sqrt_price_to_tick_index(MIN_SQRT_PRICE) == MIN_TICK

    def test_max_sqrt_price(self):
        assert sqrt_price_to_tick_index(MAX_SQRT_PRICE) == MAX_TICK

    def test_price_one(self):
        assert sqrt_price_to_tick_index(Q64) == 0

    def test_round_trip_vectors(self):
        """벡터 틱 왕복 변환"""
        for tick in list(POSITIVE_TICK_VECTORS) + list(NEGATIVE_TICK_VECTORS):
            assert sqrt_price_to_tick_index(tick_index_to_sqrt_price(tick)) == tick, tick

    def test_round_trip_sample(self):
        """범위 전체에서 고르게 뽑은 틱 왕복 변환"""
        for tick in range(MIN_TICK, MAX_TICK + 1, 7919):
            assert sqrt_price_to_tick_index(tick_index_to_sqrt_price(tick)) == tick, tick
        for tick in (MIN_TICK + 1, MAX_TICK - 1, -443000, 443000):
            assert sqrt_price_to_tick_index(tick_index_to_sqrt_price(tick)) == tick, tick

    def test_floor_semantics(self):
        """틱 가격 사이의 sqrtPrice는 아래 틱으로 내림"""
        for tick in (-1000, -1, 0, 5, 1000):
            sqrt_price = tick_index_to_sqrt_price(tick)
            next_sqrt_price = tick_index_to_sqrt_price(tick + 1)
            assert sqrt_price_to_tick_index(sqrt_price + 1) == tick
            assert sqrt_price_to_tick_index(next_sqrt_price - 1) == tick

    def test_below_min_sqrt_price(self):
        with pytest.raises(OutOfRangeError):
            sqrt_price_to_tick_index(MIN_SQRT_PRICE - 1)

    def test_above_max_sqrt_price(self):
        with pytest.raises(OutOfRangeError):
            sqrt_price_to_tick_index(MAX_SQRT_PRICE + 1)


class TestInvert:
    """토큰 순서 뒤집기"""

    def test_invert_tick_index(self):
        assert invert_tick_index(100) == -100
        assert invert_tick_index(0) == 0

    def test_invert_sqrt_price(self):
        assert invert_sqrt_price(tick_index_to_sqrt_price(64)) == tick_index_to_sqrt_price(-64)
        assert invert_sqrt_price(Q64) == Q64
