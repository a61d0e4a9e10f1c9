"""
Decrease Liquidity Quote 테스트

출금 quote의 범위별 토큰 구성, 최소 수령 금액, transfer fee 처리를 테스트합니다.
"""

import pytest

from ..quotes import (
    decrease_liquidity_quote_by_liquidity,
    decrease_liquidity_quote_by_token_amount,
    increase_liquidity_quote_by_liquidity,
)
from ..math.slippage import adjust_for_slippage
from ..math.tick_math import tick_index_to_sqrt_price
from ..math.token_math import get_liquidity_from_token_b, get_token_a_from_liquidity
from ..math.transfer_fee import calculate_transfer_fee_excluded_amount
from ..data.types import (
    MintInfo,
    Percentage,
    PoolData,
    SlippageStrategy,
    TokenExtensionContext,
    TransferFeeConfig,
)
from ..constants import U64_MAX, U128_MAX
from ..errors import AmountOverflowError, InvalidInputError

MINT_A = "So11111111111111111111111111111111111111112"
MINT_B = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def make_pool(tick_current_index=0, tick_spacing=64):
    return PoolData(
        tick_current_index=tick_current_index,
        sqrt_price=tick_index_to_sqrt_price(tick_current_index),
        tick_spacing=tick_spacing,
        fee_rate=3000,
        token_mint_a=MINT_A,
        token_mint_b=MINT_B,
        liquidity=10 ** 12,
    )


def no_extensions():
    return TokenExtensionContext.without_extensions(MINT_A, MINT_B)


class TestConcreteScenarios:
    """유동성 100000, 범위 [0, 64], 슬리피지 0"""

    def test_at_lower_price(self):
        """가격 = 하한: token A만 받음, 최소치 = 추정치"""
        for strategy in SlippageStrategy:
            quote = decrease_liquidity_quote_by_liquidity(
                100000, 0, 64, make_pool(0), no_extensions(), Percentage.zero(), strategy
            )
            assert quote.token_est_a > 0
            assert quote.token_est_b == 0
            assert quote.token_min_a == quote.token_est_a
            assert quote.token_min_b == 0

    def test_at_lower_price_exact(self):
        expected = get_token_a_from_liquidity(
            100000, tick_index_to_sqrt_price(0), tick_index_to_sqrt_price(64), False
        )
        quote = decrease_liquidity_quote_by_liquidity(
            100000, 0, 64, make_pool(0), no_extensions(), Percentage.zero()
        )
        assert quote.token_est_a == expected == 319

    def test_at_upper_price(self):
        """가격 = 상한: token B만 받음"""
        quote = decrease_liquidity_quote_by_liquidity(
            100000, 0, 64, make_pool(64), no_extensions(), Percentage.zero()
        )
        assert quote.token_est_a == 0
        assert quote.token_est_b > 0


class TestDecreaseByLiquidity:
    """decrease_liquidity_quote_by_liquidity 테스트"""

    def test_amount_strategy(self):
        """AMOUNT: 최소치 = floor(추정치 * (1 - t))"""
        slippage = Percentage.from_bps(100)
        quote = decrease_liquidity_quote_by_liquidity(
            10 ** 10, -64, 64, make_pool(0), no_extensions(), slippage, SlippageStrategy.AMOUNT
        )
        assert quote.liquidity_amount == 10 ** 10
        assert quote.token_min_a == adjust_for_slippage(quote.token_est_a, slippage, False)
        assert quote.token_min_b == adjust_for_slippage(quote.token_est_b, slippage, False)

    def test_price_bound_strategy(self):
        """PRICE_BOUND: 세 가격 중 최소 수령량"""
        quote = decrease_liquidity_quote_by_liquidity(
            10 ** 10, -640, 640, make_pool(0), no_extensions(), Percentage.from_bps(100), SlippageStrategy.PRICE_BOUND
        )
        assert quote.token_min_a < quote.token_est_a
        assert quote.token_min_b < quote.token_est_b

    def test_rounds_down(self):
        """출금 추정치는 예치 추정치보다 크지 않음 (내림)"""
        increase = increase_liquidity_quote_by_liquidity(
            10 ** 10, -64, 64, make_pool(0), no_extensions(), Percentage.zero()
        )
        decrease = decrease_liquidity_quote_by_liquidity(
            10 ** 10, -64, 64, make_pool(0), no_extensions(), Percentage.zero()
        )
        assert decrease.token_est_a <= increase.token_est_a
        assert decrease.token_est_b <= increase.token_est_b

    def test_zero_liquidity(self):
        quote = decrease_liquidity_quote_by_liquidity(0, -64, 64, make_pool(0), no_extensions())
        assert quote.to_dict()["tokenEstA"] == 0
        assert quote.token_min_b == 0

    def test_transfer_fee_deducted(self):
        """받을 금액은 transfer fee 제외"""
        fee_config = TransferFeeConfig.single(100, 10 ** 9)
        ctx = TokenExtensionContext(MintInfo(MINT_A, 9), MintInfo(MINT_B, 6, transfer_fee_config=fee_config))
        plain = decrease_liquidity_quote_by_liquidity(
            10 ** 10, -64, 64, make_pool(0), no_extensions(), Percentage.zero(), SlippageStrategy.AMOUNT
        )
        quote = decrease_liquidity_quote_by_liquidity(
            10 ** 10, -64, 64, make_pool(0), ctx, Percentage.zero(), SlippageStrategy.AMOUNT
        )
        expected_b = calculate_transfer_fee_excluded_amount(fee_config.epoch_fee(0), plain.token_est_b)
        assert quote.token_est_b == expected_b.amount
        assert quote.transfer_fee.deducted_from_token_est_b == expected_b.fee
        assert quote.token_est_a == plain.token_est_a

    def test_invalid_range(self):
        with pytest.raises(InvalidInputError):
            decrease_liquidity_quote_by_liquidity(1000, 64, 0, make_pool(0), no_extensions())


class TestDecreaseByTokenAmount:
    """decrease_liquidity_quote_by_token_amount 테스트"""

    def test_token_b_in_range(self):
        amount = 1_000_000
        quote = decrease_liquidity_quote_by_token_amount(
            MINT_B, amount, -64, 64, make_pool(0), no_extensions(), Percentage.zero()
        )
        expected_liquidity = get_liquidity_from_token_b(amount, tick_index_to_sqrt_price(-64), tick_index_to_sqrt_price(0))
        assert quote.liquidity_amount == expected_liquidity
        assert 0 < quote.token_est_b <= amount
        assert quote.token_est_a > 0

    def test_wrong_side_token(self):
        """범위 위(token B만 있음)에서 token A 요청은 0 quote"""
        quote = decrease_liquidity_quote_by_token_amount(
            MINT_A, 1_000_000, -128, -64, make_pool(0), no_extensions()
        )
        assert quote.liquidity_amount == 0
        assert quote.token_est_a == 0 and quote.token_est_b == 0

    def test_zero_amount(self):
        quote = decrease_liquidity_quote_by_token_amount(MINT_A, 0, -64, 64, make_pool(0), no_extensions())
        assert quote.liquidity_amount == 0

    def test_transfer_fee_grosses_up(self):
        """원하는 수령액에 맞추려면 더 많은 유동성 필요"""
        fee_config = TransferFeeConfig.single(100, 10 ** 9)
        ctx = TokenExtensionContext(MintInfo(MINT_A, 9), MintInfo(MINT_B, 6, transfer_fee_config=fee_config))
        plain = decrease_liquidity_quote_by_token_amount(
            MINT_B, 1_000_000, -64, 64, make_pool(0), no_extensions(), Percentage.zero()
        )
        quote = decrease_liquidity_quote_by_token_amount(
            MINT_B, 1_000_000, -64, 64, make_pool(0), ctx, Percentage.zero()
        )
        assert quote.liquidity_amount > plain.liquidity_amount

    def test_unknown_mint(self):
        with pytest.raises(InvalidInputError):
            decrease_liquidity_quote_by_token_amount("unknown", 1000, -64, 64, make_pool(0), no_extensions())


class TestPriceBoundSlippageMonotonicity:
    """허용치가 커질수록 최소 수령 금액은 늘지 않음 (좁은 범위 [0, 64], 가격은 틱 32)"""

    SLIPPAGE_BPS = [0, 10, 100, 1000, 10000]

    def _quote(self, bps):
        return decrease_liquidity_quote_by_liquidity(
            10 ** 10, 0, 64, make_pool(32), no_extensions(), Percentage.from_bps(bps), SlippageStrategy.PRICE_BOUND
        )

    def test_min_shrinks_with_tolerance(self):
        quotes = [self._quote(bps) for bps in self.SLIPPAGE_BPS]
        for prev, curr in zip(quotes, quotes[1:]):
            assert curr.token_min_a <= prev.token_min_a
            assert curr.token_min_b <= prev.token_min_b
            assert curr.token_est_a == prev.token_est_a
            assert curr.token_est_b == prev.token_est_b
        assert quotes[0].token_min_a == quotes[0].token_est_a > 0
        assert quotes[0].token_min_b == quotes[0].token_est_b > 0

    def test_shifted_price_leaves_range(self):
        """10%면 이동한 가격이 범위 밖: 양쪽 모두 최소치 0"""
        quote = self._quote(1000)
        assert quote.token_est_a > 0 and quote.token_est_b > 0
        assert quote.token_min_a == 0
        assert quote.token_min_b == 0


class TestAmountBounds:
    """출금 금액 / 유동성 범위 검사"""

    def test_negative_token_amount(self):
        with pytest.raises(InvalidInputError):
            decrease_liquidity_quote_by_token_amount(MINT_B, -1, -64, 64, make_pool(0), no_extensions())

    def test_token_amount_over_u64(self):
        with pytest.raises(AmountOverflowError):
            decrease_liquidity_quote_by_token_amount(MINT_B, U64_MAX + 1, -64, 64, make_pool(0), no_extensions())

    def test_liquidity_over_u128(self):
        with pytest.raises(AmountOverflowError):
            decrease_liquidity_quote_by_liquidity(U128_MAX + 1, -64, 64, make_pool(0), no_extensions())
