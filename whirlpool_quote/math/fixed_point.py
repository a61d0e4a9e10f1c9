"""
Fixed Point Math - Q64.64 고정소수점 헬퍼

온체인 프로그램은 u64/u128/u256 정수로 계산합니다. Python int는 임의 정밀도이므로
곱셈 중간값은 그대로 두고, 결과가 경계(u64, u128)를 넘는지만 명시적으로 검사합니다.
wrapping 연산(fee growth 등)도 여기서 2^128 모듈러로 흉내냅니다.

핵심 공식:
    x64 = value * 2^64
    value = x64 / 2^64
"""

from decimal import Decimal, localcontext

from ..constants import Q64, U64_MAX, U128_MAX
from ..errors import AmountOverflowError, InvalidInputError

# Decimal 변환 정밀도 (u128 * 10^18 수준까지 손실 없음)
DECIMAL_PRECISION: int = 80

_U128_MODULUS = U128_MAX + 1


def check_u64(value: int, name: str = "amount") -> int:
    """u64 범위 검사

    Raises:
        AmountOverflowError: value > U64_MAX
        InvalidInputError: value < 0
    """
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative: {value}")
    if value > U64_MAX:
        raise AmountOverflowError(f"{name} exceeds u64 max: {value}")
    return value


def check_u128(value: int, name: str = "value") -> int:
    """u128 범위 검사"""
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative: {value}")
    if value > U128_MAX:
        raise AmountOverflowError(f"{name} exceeds u128 max: {value}")
    return value


def wrapping_sub_u128(a: int, b: int) -> int:
    """u128 wrapping 뺄셈 (온체인 wrapping_sub과 동일)"""
    return (a - b) % _U128_MODULUS


def wrapping_add_u128(a: int, b: int) -> int:
    return (a + b) % _U128_MODULUS


def div_round_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    return (a * b) // denominator


def mul_div_round_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 올림"""
    return div_round_up(a * b, denominator)


def mul_shift_right(a: int, b: int, shift: int) -> int:
    """(a * b) >> shift, 결과는 u128 이내여야 함"""
    return check_u128((a * b) >> shift, "shifted product")


def to_x64(value) -> int:
    """Decimal(또는 숫자) -> Q64.64 정수 (내림)"""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return int(Decimal(value) * Q64)


def from_x64(value: int) -> Decimal:
    """Q64.64 정수 -> Decimal"""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(value) / Q64
