"""
Quote 엔진 예외 정의

모든 예외는 ValueError를 상속하므로 기존처럼 `except ValueError`로도 잡을 수 있습니다.

- OutOfRangeError: 틱 / sqrt price가 프로토콜 범위를 벗어남
- InvalidInputError: 민트 불일치, 잘못된 틱 범위 등 호출자 오류
- AmountOverflowError: u64 범위를 넘는 수량
- InsufficientTickArraysError: 스왑 시뮬레이션 중 틱 배열 부족 (더 많은 틱 배열로 재시도 가능)
"""


class QuoteError(ValueError):
    """Quote 계산 실패의 기본 예외"""

    code: str = "QuoteError"
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class OutOfRangeError(QuoteError):
    code = "OutOfRange"


class InvalidInputError(QuoteError):
    code = "InvalidInput"


class AmountOverflowError(QuoteError):
    """수량이 u64(또는 u128) 표현 범위를 초과"""

    code = "Overflow"


class InsufficientTickArraysError(QuoteError):
    """공급된 틱 배열을 모두 소진했거나 현재 틱을 포함하지 않음

    호출자는 더 넓은 틱 배열 윈도우를 가져와서 다시 시도하면 됩니다.
    """

    code = "InsufficientTickArrays"
    retryable = True
