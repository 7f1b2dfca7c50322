"""
작업 추출기입니다.
문서의 각 Task 요소를 ParsedTask로 변환합니다.
한 작업의 추출 실패가 나머지 작업에 영향을 주지 않도록 작업 단위로 격리합니다.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from pydantic import ValidationError as ModelValidationError

from schedule_loader.exceptions import TaskExtractionError
from schedule_loader.models import ParsedTask, PredecessorLink
from ..layer2_schema import DocumentTree, text_of, lenient_int, strict_int, date_part

logger = logging.getLogger(__name__)


class TaskExtractor:
    """DocumentTree에서 평면 작업 목록을 추출합니다."""

    def extract(
        self,
        tree: DocumentTree,
        tracker_field_id: Optional[str] = None,
    ) -> tuple[list[ParsedTask], list[Optional[int]]]:
        """
        모든 작업을 추출합니다.

        Args:
            tree: 파싱된 문서 트리
            tracker_field_id: 트래커 이름이 담긴 확장 속성의 FieldID (없으면 None)

        Returns:
            (추출된 작업 목록, 추출에 실패한 작업의 문서 ID 목록)
        """
        tasks: list[ParsedTask] = []
        unresolved_ids: list[Optional[int]] = []

        for node in tree.iter_tasks():
            try:
                tasks.append(self.extract_task(node, tracker_field_id))
            except TaskExtractionError as e:
                # 형식이 잘못된 작업이거나 해석할 수 없는 항목입니다.
                display_id = lenient_int(text_of(node, "ID"))
                logger.warning(f"[TaskExtractor] 작업 추출 실패 (ID={display_id}): {e.message}")
                unresolved_ids.append(display_id)
            except Exception as e:
                # 예상하지 못한 실패도 이 작업에만 한정합니다.
                display_id = lenient_int(text_of(node, "ID"))
                logger.warning(
                    f"[TaskExtractor] 작업 추출 중 예외 (ID={display_id}): {e}", exc_info=True
                )
                unresolved_ids.append(display_id)

        logger.info(
            f"[TaskExtractor] 작업 추출 완료: {len(tasks)}개 성공, {len(unresolved_ids)}개 실패"
        )
        return tasks, unresolved_ids

    def extract_task(
        self,
        node: ET.Element,
        tracker_field_id: Optional[str] = None,
    ) -> ParsedTask:
        """
        Task 요소 하나를 ParsedTask로 변환합니다.
        UID를 제외한 모든 필드는 선택 사항입니다.

        Raises:
            TaskExtractionError: UID가 없거나 정수가 아닌 경우, 모델 검증 실패
        """
        raw_uid = text_of(node, "UID")
        try:
            uid = strict_int(raw_uid)
        except ValueError:
            raise TaskExtractionError(
                "UID를 읽을 수 없습니다",
                details={"uid": raw_uid},
            )

        outline_number = text_of(node, "OutlineNumber")

        try:
            return ParsedTask(
                uid=uid,
                display_id=lenient_int(text_of(node, "ID")),
                title=text_of(node, "Name"),
                outline_level=lenient_int(text_of(node, "OutlineLevel")),
                outline_number=outline_number,
                parent_outline_number=self._parent_outline_number(outline_number),
                start_date=date_part(text_of(node, "Start")),
                finish_date=date_part(text_of(node, "Finish")),
                priority=text_of(node, "Priority"),
                milestone=bool(lenient_int(text_of(node, "Milestone"))),
                percent_complete=lenient_int(text_of(node, "PercentComplete")) or 0,
                notes=text_of(node, "Notes"),
                tracker_name=self._tracker_name(node, tracker_field_id),
                predecessors=self._predecessors(node),
            )
        except ModelValidationError as e:
            raise TaskExtractionError(
                "작업 필드가 유효하지 않습니다",
                details={"uid": uid, "error": str(e)},
            )

    def _parent_outline_number(self, outline_number: Optional[str]) -> Optional[str]:
        """'1.2.3' -> '1.2', 최상위 번호는 None."""
        if not outline_number or "." not in outline_number:
            return None
        return outline_number.rsplit(".", 1)[0]

    def _tracker_name(self, node: ET.Element, tracker_field_id: Optional[str]) -> Optional[str]:
        """FieldID가 일치하는 확장 속성 값을 읽습니다. 마지막 값을 사용합니다."""
        if tracker_field_id is None:
            return None

        tracker_name = None
        for attribute in node.iterfind("ExtendedAttribute"):
            if text_of(attribute, "FieldID") != tracker_field_id:
                continue
            value = attribute.find("Value")
            if value is not None and value.text is not None:
                tracker_name = value.text
        return tracker_name

    def _predecessors(self, node: ET.Element) -> list[PredecessorLink]:
        return [
            PredecessorLink(
                predecessor_uid=lenient_int(text_of(link, "PredecessorUID")),
                link_lag=lenient_int(text_of(link, "LinkLag")) or 0,
            )
            for link in node.iterfind("PredecessorLink")
        ]
