"""
엔진 공용 예외.

- SignalValidationError: 입력 시그널 계약 위반 (필드명을 메시지/속성으로 노출)
- SnapshotBuildError: 추출/매핑/내러티브 단계 내부 실패를 감싼다
- InvalidSessionStateError: 세션 수명주기 위반
"""

from __future__ import annotations


class SignalValidationError(ValueError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class SnapshotBuildError(RuntimeError):
    pass


class InvalidSessionStateError(RuntimeError):
    pass
