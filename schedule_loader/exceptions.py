"""
일정 문서 변환 시스템의 커스텀 예외 계층입니다.
각 레이어/서비스별 구조화된 에러 코드와 메시지를 제공합니다.
"""

from typing import Optional, Any


class LoaderError(Exception):
    """변환 시스템 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class MalformedInputError(LoaderError):
    """Layer 1: 읽을 수 없거나 압축 해제에 실패한 입력 스트림."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_READ_001", details=details)


class SchemaError(LoaderError):
    """Layer 2: 문서 최상위 구조(Project 루트)가 없음."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_SCHEMA_001", details=details)


class TaskExtractionError(LoaderError):
    """Layer 3: 개별 작업 추출 실패. 배치를 중단하지 않고 수집됩니다."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_TASK_001", details=details)


class ResolutionMiss(LoaderError):
    """Layer 4: 할당/리소스 참조를 연결할 수 없음. 조용히 건너뜁니다."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_RESOLVE_001", details=details)


class ExportInputError(LoaderError):
    """Layer 5: 내보낼 작업 항목이 없음. 빈 문서를 생성합니다."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_EXPORT_001", details=details)


class StorageError(LoaderError):
    """파일 저장소 관련 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STORE_001", details=details)


class InputValidationError(LoaderError):
    """입력 유효성 검증 에러 (400 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)
