"""
일정 문서 스키마 추출기입니다.
XML을 트리로 파싱하면서 네임스페이스를 제거하고,
작업/리소스/할당 레코드와 필드 조회 도우미를 제공합니다.
"""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import date
from typing import BinaryIO, Iterator, Optional

from schedule_loader.exceptions import MalformedInputError, SchemaError

logger = logging.getLogger(__name__)

ROOT_TAG = "Project"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ==================== 필드 조회 도우미 ====================

def text_of(node: ET.Element, tag: str) -> Optional[str]:
    """자식 요소의 텍스트를 공백을 제거하여 반환합니다. 없으면 None."""
    child = node.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def lenient_int(text: Optional[str]) -> Optional[int]:
    """앞쪽의 정수 부분만 읽습니다. 숫자가 아니면 None."""
    if text is None:
        return None
    match = _LEADING_INT.match(text)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # 정수 변환 자릿수 제한 초과
        return None


def strict_int(text: Optional[str]) -> int:
    """정수로만 이루어진 텍스트를 읽습니다. 아니면 ValueError."""
    if text is None:
        raise ValueError("값이 없습니다")
    return int(text.strip())


def date_part(text: Optional[str]) -> Optional[date]:
    """'2024-01-01T08:00:00' 형태에서 날짜 부분만 읽습니다."""
    if not text:
        return None
    try:
        return date.fromisoformat(text.split("T")[0].strip())
    except ValueError:
        return None


def _local_name(tag: str) -> str:
    # "{http://schemas.microsoft.com/project}Task" -> "Task"
    return tag.rsplit("}", 1)[-1]


# ==================== 문서 트리 ====================

class DocumentTree:
    """네임스페이스가 제거된 일정 문서 트리."""

    def __init__(self, root: ET.Element):
        self.root = root

    @property
    def project_name(self) -> Optional[str]:
        return text_of(self.root, "Name") or text_of(self.root, "Title")

    def find_tracker_field_id(self, alias_name: Optional[str]) -> Optional[str]:
        """
        별칭(Alias)이 일치하는 확장 속성 정의를 찾아 FieldID를 반환합니다.
        여러 개가 일치하면 마지막 것을 사용합니다.
        """
        if not alias_name:
            return None

        field_id = None
        for attribute in self.root.iterfind("ExtendedAttributes/ExtendedAttribute"):
            if text_of(attribute, "Alias") != alias_name:
                continue
            found = text_of(attribute, "FieldID")
            if found:
                field_id = found
        return field_id

    def iter_tasks(self) -> Iterator[ET.Element]:
        return self.root.iterfind("Tasks/Task")

    def iter_resources(self) -> Iterator[ET.Element]:
        return self.root.iterfind("Resources/Resource")

    def iter_assignments(self) -> Iterator[ET.Element]:
        return self.root.iterfind("Assignments/Assignment")


class SchemaExtractor:
    """바이트 스트림을 DocumentTree로 파싱합니다."""

    def parse(self, byte_stream: BinaryIO) -> DocumentTree:
        """
        문서를 파싱하고 모든 네임스페이스 접두어를 제거합니다.

        Raises:
            MalformedInputError: XML 문법 오류
            SchemaError: 최상위 Project 요소가 없는 경우
        """
        try:
            root = ET.parse(byte_stream).getroot()
        except ET.ParseError as e:
            raise MalformedInputError(
                "XML 문서를 파싱할 수 없습니다",
                details={"error": str(e)},
            )

        for element in root.iter():
            element.tag = _local_name(element.tag)

        if root.tag != ROOT_TAG:
            raise SchemaError(
                f"일정 문서의 최상위 요소가 {ROOT_TAG}가 아닙니다",
                details={"root": root.tag},
            )

        logger.debug(f"[SchemaExtractor] 문서 파싱 완료: {self._count(root)}")
        return DocumentTree(root)

    def _count(self, root: ET.Element) -> dict:
        return {
            "tasks": len(root.findall("Tasks/Task")),
            "resources": len(root.findall("Resources/Resource")),
            "assignments": len(root.findall("Assignments/Assignment")),
        }
