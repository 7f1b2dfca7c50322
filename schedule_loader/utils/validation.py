"""입력 유효성 검증 유틸리티.

일정 문서 업로드 시 파일명, 크기, 확장자를 검증합니다.
압축 여부는 확장자가 아니라 문서 리더가 내용으로 판단합니다.
"""

import os
import re

from schedule_loader.config import get_settings
from schedule_loader.exceptions import InputValidationError


# 허용된 파일 확장자 목록 (.xml.gz는 .gz로 취급)
ALLOWED_EXTENSIONS = {".xml", ".gz"}

# 위험한 파일명 패턴
DANGEROUS_PATTERNS = re.compile(r"[<>:\"|?*\x00-\x1f]")


def validate_filename(filename: str) -> str:
    """
    파일명 유효성 검증.

    - 경로 순회 공격 방지 (../, / 등)
    - 널 바이트 제거
    - 위험 문자 검사
    - 길이 제한

    Returns:
        정리된 안전한 파일명

    Raises:
        InputValidationError: 유효하지 않은 파일명
    """
    settings = get_settings()

    if not filename or not filename.strip():
        raise InputValidationError("파일을 선택해주세요")

    cleaned = filename.replace("\x00", "")

    basename = os.path.basename(cleaned)
    if basename != cleaned or ".." in cleaned:
        raise InputValidationError(
            "잘못된 파일명입니다: 경로 순회가 감지되었습니다",
            details={"filename": filename},
        )

    if DANGEROUS_PATTERNS.search(basename):
        raise InputValidationError(
            "파일명에 허용되지 않는 문자가 포함되어 있습니다",
            details={"filename": filename},
        )

    if len(basename) > settings.max_filename_length:
        raise InputValidationError(
            f"파일명이 너무 깁니다 (최대 {settings.max_filename_length}자)",
            details={"filename": basename, "length": len(basename)},
        )

    return basename


def validate_file_size(file_size: int) -> None:
    """
    파일 크기 검증. 빈 파일과 제한 초과 파일을 거부합니다.

    Raises:
        InputValidationError: 빈 파일 또는 크기 제한 초과
    """
    settings = get_settings()
    max_bytes = settings.max_file_size_mb * 1024 * 1024

    if file_size <= 0:
        raise InputValidationError("빈 파일입니다")

    if file_size > max_bytes:
        raise InputValidationError(
            f"파일 크기가 제한을 초과했습니다 (최대 {settings.max_file_size_mb}MB)",
            details={
                "file_size_bytes": file_size,
                "max_size_bytes": max_bytes,
            },
        )


def validate_file_extension(filename: str) -> str:
    """
    파일 확장자 검증.

    Returns:
        소문자로 변환된 확장자 (예: ".xml")

    Raises:
        InputValidationError: 허용되지 않는 확장자
    """
    ext = os.path.splitext(filename)[1].lower()

    if ext not in ALLOWED_EXTENSIONS:
        raise InputValidationError(
            f"허용되지 않는 파일 형식입니다: {ext or '(없음)'}",
            details={
                "extension": ext,
                "allowed": sorted(ALLOWED_EXTENSIONS),
            },
        )

    return ext
