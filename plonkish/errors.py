"""
오류 분류
=========

  - SynthesisError:      합성(셀 할당) 단계에서 값이 필요했지만 없거나,
                         격자 범위·열 종류 등 할당 규칙을 어겼을 때
  - ConfigurationError:  열/셀렉터/게이트 선언이 중복되거나 모순될 때 (빌드 시점 결함)
  - VerificationFailure: 제약 검사 결과가 실패일 때. 실패 목록을 담는다.

코어는 재시도하지 않으며 모든 오류는 바로 호출자에게 전파된다.
"""


class PlonkishError(Exception):
    """이 패키지의 모든 오류의 기반 클래스."""


class SynthesisError(PlonkishError):
    """셀 할당 중 발생한 오류."""


class ConfigurationError(PlonkishError):
    """격자 레이아웃 선언 오류."""


class VerificationFailure(PlonkishError):
    """제약이 만족되지 않음.

    속성:
        failures: 실패 항목 리스트 (dev.MockProver 의 실패 레코드)
    """

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [str(f) for f in self.failures]
        super().__init__(
            f"{len(self.failures)}개의 제약이 만족되지 않았습니다:\n" + "\n".join(lines)
        )
