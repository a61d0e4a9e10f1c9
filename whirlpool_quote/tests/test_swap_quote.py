"""
Swap Quote 테스트

스왑 시뮬레이션, 틱 배열 시퀀스, 가격 한도, transfer fee 처리를 테스트합니다.

기본 풀: 가격 1 (틱 0), tick spacing 64, 유동성 10^12, 수수료 0.3%.
유동성이 수량에 비해 충분히 커서 가격은 거의 움직이지 않습니다.
"""

import pytest

from ..quotes import (
    TickArraySequence,
    swap_quote_by_input_token,
    swap_quote_by_output_token,
    swap_quote_by_token_amount,
)
from ..quotes.tick_array_sequence import TickArrayIndex
from ..quotes.swap_quote import get_default_other_amount_threshold, get_default_sqrt_price_limit
from ..math.fee_math import calculate_protocol_fee
from ..math.slippage import adjust_for_slippage
from ..math.swap_math import compute_swap_step
from ..math.tick_math import tick_index_to_sqrt_price
from ..math.token_math import get_token_a_from_liquidity, get_token_b_from_liquidity
from ..math.fixed_point import mul_div_round_up
from ..data.types import (
    MintInfo,
    Percentage,
    PoolData,
    TickArrayData,
    TickData,
    TokenExtensionContext,
    TransferFeeConfig,
)
from ..constants import MAX_SQRT_PRICE, MIN_SQRT_PRICE, Q64, U64_MAX
from ..errors import InsufficientTickArraysError, InvalidInputError, OutOfRangeError

MINT_A = "So11111111111111111111111111111111111111112"
MINT_B = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
LIQUIDITY = 10 ** 12


def make_pool(liquidity=LIQUIDITY):
    return PoolData(
        tick_current_index=0,
        sqrt_price=Q64,
        tick_spacing=64,
        fee_rate=3000,
        token_mint_a=MINT_A,
        token_mint_b=MINT_B,
        liquidity=liquidity,
        protocol_fee_rate=300,
    )


def no_extensions():
    return TokenExtensionContext.without_extensions(MINT_A, MINT_B)


def empty_arrays(starts):
    return [TickArrayData(start) for start in starts]


A_TO_B_STARTS = [0, -5632, -11264]
B_TO_A_STARTS = [0, 5632, 11264]


class TestComputeSwapStep:
    """compute_swap_step 테스트"""

    def test_reaches_target(self):
        """남은 수량이 충분하면 목표 가격에 도달"""
        target = tick_index_to_sqrt_price(-64)
        step = compute_swap_step(10 ** 12, 3000, LIQUIDITY, Q64, target, True, True)
        assert step.next_sqrt_price == target
        assert step.amount_in == get_token_a_from_liquidity(LIQUIDITY, target, Q64, True)
        assert step.amount_out == get_token_b_from_liquidity(LIQUIDITY, target, Q64, False)
        assert step.fee_amount == mul_div_round_up(step.amount_in, 3000, 997000)

    def test_exact_in_consumes_remaining(self):
        """목표 전에 멈추면 입력 + 수수료 = 남은 수량"""
        step = compute_swap_step(1_000_000, 3000, LIQUIDITY, Q64, MIN_SQRT_PRICE, True, True)
        assert step.amount_in + step.fee_amount == 1_000_000
        assert MIN_SQRT_PRICE < step.next_sqrt_price < Q64

    def test_exact_out_capped(self):
        """출력 지정이면 출력은 남은 수량을 넘지 않음"""
        step = compute_swap_step(1_000_000, 3000, LIQUIDITY, Q64, MAX_SQRT_PRICE, False, False)
        assert step.amount_out == 1_000_000
        assert step.next_sqrt_price > Q64

    def test_zero_liquidity_jumps_to_target(self):
        target = tick_index_to_sqrt_price(-64)
        step = compute_swap_step(1000, 3000, 0, Q64, target, True, True)
        assert step.next_sqrt_price == target
        assert step.amount_in == 0 and step.amount_out == 0 and step.fee_amount == 0


class TestTickArraySequence:
    """TickArraySequence 테스트"""

    def test_truncates_at_first_missing_array(self):
        arrays = [TickArrayData(0), None, TickArrayData(-11264)]
        sequence = TickArraySequence(arrays, 64, True)
        assert len(sequence) == 1

    def test_keeps_at_most_three_arrays(self):
        """스왑 instruction이 받는 배열 수까지만 사용"""
        sequence = TickArraySequence(empty_arrays([0, 5632, 11264, 16896]), 64, False)
        assert len(sequence) == 3

    def test_first_array_missing(self):
        with pytest.raises(InsufficientTickArraysError):
            TickArraySequence([None, TickArrayData(0)], 64, True)

    def test_check_tick_array_0(self):
        sequence = TickArraySequence(empty_arrays([-5632]), 64, True)
        with pytest.raises(InsufficientTickArraysError):
            sequence.check_tick_array_0(0)

    def test_check_tick_array_0_b_to_a_shift(self):
        """b->a는 현재 틱 + tick spacing이 첫 배열에 있어야 함"""
        sequence = TickArraySequence(empty_arrays([0]), 64, False)
        sequence.check_tick_array_0(0)
        with pytest.raises(InsufficientTickArraysError):
            sequence.check_tick_array_0(5600)

    def test_find_next_initialized_a_to_b(self):
        arrays = empty_arrays(A_TO_B_STARTS)
        arrays[1] = TickArrayData.with_ticks(-5632, 64, {-128: TickData(initialized=True, liquidity_net=5)})
        sequence = TickArraySequence(arrays, 64, True)
        tick, data = sequence.find_next_initialized_tick_index(0)
        assert tick == -128
        assert data.liquidity_net == 5
        assert sequence.touched_start_tick_indexes() == (0, -5632, -5632)

    def test_find_next_initialized_includes_current_tick(self):
        """a->b 탐색은 현재 틱을 포함"""
        arrays = [TickArrayData.with_ticks(0, 64, {0: TickData(initialized=True)})]
        sequence = TickArraySequence(arrays, 64, True)
        assert sequence.find_next_initialized_tick_index(0)[0] == 0

    def test_find_next_initialized_b_to_a(self):
        arrays = empty_arrays(B_TO_A_STARTS)
        arrays[0] = TickArrayData.with_ticks(0, 64, {0: TickData(initialized=True), 128: TickData(initialized=True)})
        sequence = TickArraySequence(arrays, 64, False)
        assert sequence.find_next_initialized_tick_index(0)[0] == 128

    def test_no_initialized_tick_returns_boundary(self):
        sequence = TickArraySequence(empty_arrays(A_TO_B_STARTS), 64, True)
        tick, data = sequence.find_next_initialized_tick_index(0)
        assert tick == -11264
        assert data is None

    def test_search_outside_sequence(self):
        sequence = TickArraySequence(empty_arrays([0]), 64, True)
        with pytest.raises(InsufficientTickArraysError):
            sequence.find_next_initialized_tick_index(-1)

    def test_tick_array_index(self):
        index = TickArrayIndex.from_tick_index(-64, 64)
        assert index.array_index == -1
        assert index.offset_index == 87
        assert index.to_tick_index() == -64
        assert index.to_next_initializable_tick_index().to_tick_index() == 0


class TestSwapExactIn:
    """입력 수량 지정 스왑"""

    def test_a_to_b(self):
        slippage = Percentage.from_bps(100)
        quote = swap_quote_by_input_token(
            MINT_A, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions(), slippage
        )
        assert quote.a_to_b is True
        assert quote.amount_specified_is_input is True
        assert quote.amount == 1_000_000
        assert quote.estimated_amount_in == 1_000_000
        assert 996_990 <= quote.estimated_amount_out <= 997_000
        assert 3000 <= quote.estimated_fee_amount <= 3001
        assert quote.estimated_protocol_fee_amount == calculate_protocol_fee(quote.estimated_fee_amount, 300)
        assert quote.other_amount_threshold == adjust_for_slippage(quote.estimated_amount_out, slippage, False)
        assert quote.estimated_end_sqrt_price < Q64
        assert quote.estimated_end_tick_index == -1
        assert quote.sqrt_price_limit == MIN_SQRT_PRICE
        assert quote.tick_array_start_indexes == (0, -5632, -11264)

    def test_b_to_a(self):
        quote = swap_quote_by_input_token(
            MINT_B, 1_000_000, make_pool(), empty_arrays(B_TO_A_STARTS), no_extensions(), Percentage.zero()
        )
        assert quote.a_to_b is False
        assert quote.estimated_amount_in == 1_000_000
        assert 996_990 <= quote.estimated_amount_out <= 997_000
        assert quote.other_amount_threshold == quote.estimated_amount_out
        assert quote.estimated_end_sqrt_price > Q64
        assert quote.estimated_end_tick_index == 0
        assert quote.sqrt_price_limit == MAX_SQRT_PRICE

    def test_fee_growth_advances(self):
        quote = swap_quote_by_input_token(
            MINT_A, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions()
        )
        lp_fee = quote.estimated_fee_amount - quote.estimated_protocol_fee_amount
        assert quote.estimated_fee_growth_global_input == (lp_fee << 64) // LIQUIDITY

    def test_crosses_initialized_tick(self):
        """틱 -64에서 유동성이 모두 빠지면 가격 한도까지 빈 구간을 지남"""
        arrays = empty_arrays(A_TO_B_STARTS)
        arrays[0] = TickArrayData.with_ticks(0, 64, {
            64: TickData(initialized=True, liquidity_net=-LIQUIDITY, liquidity_gross=LIQUIDITY),
        })
        arrays[1] = TickArrayData.with_ticks(-5632, 64, {
            -64: TickData(initialized=True, liquidity_net=LIQUIDITY, liquidity_gross=LIQUIDITY),
        })
        limit = tick_index_to_sqrt_price(-128)
        slippage = Percentage.from_bps(100)

        quote = swap_quote_by_token_amount(
            MINT_A, 10 ** 10, True, make_pool(), arrays, no_extensions(), slippage, limit
        )

        sqrt_price_lower = tick_index_to_sqrt_price(-64)
        amount_in = get_token_a_from_liquidity(LIQUIDITY, sqrt_price_lower, Q64, True)
        fee = mul_div_round_up(amount_in, 3000, 997000)
        amount_out = get_token_b_from_liquidity(LIQUIDITY, sqrt_price_lower, Q64, False)

        assert quote.estimated_amount_in == amount_in + fee
        assert quote.estimated_amount_out == amount_out
        assert quote.estimated_fee_amount == fee
        assert quote.estimated_end_sqrt_price == limit
        assert quote.estimated_end_tick_index == -128
        assert quote.other_amount_threshold == adjust_for_slippage(amount_out, slippage, False)
        lp_fee = fee - calculate_protocol_fee(fee, 300)
        assert quote.estimated_fee_growth_global_input == (lp_fee << 64) // LIQUIDITY

    def test_threshold_violation(self):
        with pytest.raises(InvalidInputError):
            swap_quote_by_token_amount(
                MINT_A, 1_000_000, True, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions(),
                other_amount_threshold=2_000_000,
            )

    def test_transfer_fee_on_input(self):
        """입력 토큰 fee를 뗀 금액으로 시뮬레이션, 추정 입력은 보낸 금액 그대로"""
        fee_config = TransferFeeConfig.single(100, 10 ** 9)
        ctx = TokenExtensionContext(MintInfo(MINT_A, 9, transfer_fee_config=fee_config), MintInfo(MINT_B, 6))
        quote = swap_quote_by_input_token(MINT_A, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), ctx)
        assert quote.estimated_amount_in == 1_000_000
        assert quote.transfer_fee.deducting_from_estimated_amount_in == 10_000
        assert quote.transfer_fee.deducted_from_estimated_amount_out == 0
        assert 987_000 <= quote.estimated_amount_out <= 987_100

    def test_transfer_fee_on_output(self):
        fee_config = TransferFeeConfig.single(100, 10 ** 9)
        ctx = TokenExtensionContext(MintInfo(MINT_A, 9), MintInfo(MINT_B, 6, transfer_fee_config=fee_config))
        plain = swap_quote_by_input_token(
            MINT_A, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions()
        )
        quote = swap_quote_by_input_token(MINT_A, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), ctx)
        fee = quote.transfer_fee.deducted_from_estimated_amount_out
        assert fee > 0
        assert quote.estimated_amount_out + fee == plain.estimated_amount_out


class TestSwapExactOut:
    """출력 수량 지정 스왑"""

    def test_b_to_a(self):
        """token A를 받기 위해 token B를 넣음"""
        slippage = Percentage.from_bps(100)
        quote = swap_quote_by_output_token(
            MINT_A, 1_000_000, make_pool(), empty_arrays(B_TO_A_STARTS), no_extensions(), slippage
        )
        assert quote.a_to_b is False
        assert quote.amount_specified_is_input is False
        assert quote.estimated_amount_out == 1_000_000
        assert 1_000_000 < quote.estimated_amount_in < 1_010_000
        assert quote.other_amount_threshold == adjust_for_slippage(quote.estimated_amount_in, slippage, True)
        assert quote.estimated_end_tick_index == 0
        assert quote.tick_array_start_indexes == (0, 5632, 11264)

    def test_a_to_b(self):
        quote = swap_quote_by_output_token(
            MINT_B, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions(), Percentage.zero()
        )
        assert quote.a_to_b is True
        assert quote.estimated_amount_out == 1_000_000
        assert quote.other_amount_threshold == quote.estimated_amount_in

    def test_threshold_violation(self):
        with pytest.raises(InvalidInputError):
            swap_quote_by_token_amount(
                MINT_A, 1_000_000, False, make_pool(), empty_arrays(B_TO_A_STARTS), no_extensions(),
                other_amount_threshold=1000,
            )

    def test_transfer_fee_on_output(self):
        """받을 금액에 출력 토큰 fee를 더해 시뮬레이션"""
        fee_config = TransferFeeConfig.single(100, 10 ** 9)
        ctx = TokenExtensionContext(MintInfo(MINT_A, 9, transfer_fee_config=fee_config), MintInfo(MINT_B, 6))
        quote = swap_quote_by_output_token(MINT_A, 1_000_000, make_pool(), empty_arrays(B_TO_A_STARTS), ctx)
        assert quote.estimated_amount_out == 1_000_000
        assert quote.transfer_fee.deducted_from_estimated_amount_out > 0


class TestSwapEdgeCases:
    """0 수량, 가격 한도, 틱 배열 부족"""

    def test_zero_amount(self):
        quote = swap_quote_by_input_token(MINT_A, 0, make_pool(), [None], no_extensions())
        assert quote.estimated_amount_in == 0
        assert quote.estimated_amount_out == 0
        assert quote.other_amount_threshold == 0
        assert quote.estimated_end_sqrt_price == Q64
        assert quote.tick_array_start_indexes == ()

    def test_unknown_mint(self):
        with pytest.raises(InvalidInputError):
            swap_quote_by_input_token("unknown", 1000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions())

    def test_limit_wrong_direction(self):
        with pytest.raises(InvalidInputError):
            swap_quote_by_input_token(
                MINT_A, 1000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions(),
                sqrt_price_limit=tick_index_to_sqrt_price(64),
            )
        with pytest.raises(InvalidInputError):
            swap_quote_by_input_token(
                MINT_B, 1000, make_pool(), empty_arrays(B_TO_A_STARTS), no_extensions(),
                sqrt_price_limit=tick_index_to_sqrt_price(-64),
            )

    def test_limit_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            swap_quote_by_input_token(
                MINT_A, 1000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions(),
                sqrt_price_limit=MIN_SQRT_PRICE - 1,
            )

    def test_amount_over_u64(self):
        with pytest.raises(ValueError):
            swap_quote_by_input_token(MINT_A, U64_MAX + 1, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions())

    def test_insufficient_tick_arrays(self):
        """한 배열만으로는 큰 스왑을 끝낼 수 없음 (재시도 가능한 오류)"""
        with pytest.raises(InsufficientTickArraysError) as exc_info:
            swap_quote_by_input_token(
                MINT_A, 10 ** 15, make_pool(liquidity=1000), empty_arrays([0]), no_extensions()
            )
        assert exc_info.value.retryable is True

    def test_first_array_must_contain_current_tick(self):
        with pytest.raises(InsufficientTickArraysError):
            swap_quote_by_input_token(MINT_A, 1000, make_pool(), empty_arrays([-5632]), no_extensions())

    def test_defaults(self):
        assert get_default_sqrt_price_limit(True) == MIN_SQRT_PRICE
        assert get_default_sqrt_price_limit(False) == MAX_SQRT_PRICE
        assert get_default_other_amount_threshold(True) == 0
        assert get_default_other_amount_threshold(False) == U64_MAX

    def test_to_dict(self):
        quote = swap_quote_by_input_token(
            MINT_A, 1_000_000, make_pool(), empty_arrays(A_TO_B_STARTS), no_extensions()
        )
        data = quote.to_dict()
        assert data["aToB"] is True
        assert data["tickArrayStartIndexes"] == [0, -5632, -11264]
        assert data["estimatedAmountIn"] == 1_000_000


class TestSwapTickArrayLimit:
    """틱 배열 개수 제한과 가격 한도 경계"""

    def test_fourth_array_not_crossed(self):
        """배열 4개를 넘겨도 세 번째 배열 너머는 탐색하지 않음"""
        with pytest.raises(InsufficientTickArraysError):
            swap_quote_by_input_token(
                MINT_B, 10 ** 17, make_pool(), empty_arrays([0, 5632, 11264, 16896]), no_extensions(),
                sqrt_price_limit=tick_index_to_sqrt_price(17536),
            )

    def test_touched_arrays_within_limit(self):
        quote = swap_quote_by_input_token(
            MINT_B, 10 ** 17, make_pool(), empty_arrays([0, 5632, 11264, 16896]), no_extensions(),
            sqrt_price_limit=tick_index_to_sqrt_price(12000),
        )
        assert quote.estimated_end_tick_index == 12000
        assert quote.tick_array_start_indexes == (0, 5632, 11264)

    def test_limit_equal_to_current_price(self):
        for mint in (MINT_A, MINT_B):
            with pytest.raises(InvalidInputError):
                swap_quote_by_input_token(
                    mint, 1000, make_pool(), empty_arrays(A_TO_B_STARTS if mint == MINT_A else B_TO_A_STARTS),
                    no_extensions(), sqrt_price_limit=Q64,
                )
