"""
일정 문서 변환의 전체 흐름을 관리하는 파사드(Facade)입니다.

가져오기(Import):
1. 읽기 (Reading): 일반 XML / gzip 감지
2. 스키마 (Schema): 트리 파싱, 트래커 필드 ID 조회
3. 추출/계층 (Hierarchy): 작업 추출, 카테고리 추론
4. 할당 (Assignment): 리소스를 사용자와 연결

내보내기(Export):
1. 트리 빌드: 개요 번호/수준 계산
2. 직렬화: MS Project XML 생성
"""

import logging
from datetime import datetime
from typing import BinaryIO, Iterable, Optional

from schedule_loader.config import Settings, get_settings
from schedule_loader.exceptions import ExportInputError
from schedule_loader.models import (
    ConversionResult,
    ExportResult,
    Project,
    ProjectMember,
    User,
    Version,
    WorkItem,
)
from schedule_loader.layers.layer1_reading import DocumentReader
from schedule_loader.layers.layer2_schema import SchemaExtractor
from schedule_loader.layers.layer3_hierarchy import TaskExtractor, HierarchyReconstructor
from schedule_loader.layers.layer4_assignment import ResourceResolver
from schedule_loader.layers.layer5_export import ExportTreeBuilder, ScheduleSerializer

logger = logging.getLogger(__name__)


class ScheduleConverter:
    """
    가져오기/내보내기 단계를 조율하는 클래스입니다.
    호출 간에 공유하는 상태가 없으므로 하나의 인스턴스를 여러 요청에서 재사용할 수 있습니다.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

        self.reader = DocumentReader()
        self.extractor = SchemaExtractor()
        self.task_extractor = TaskExtractor()
        self.hierarchy = HierarchyReconstructor()
        self.resolver = ResourceResolver(self.settings.not_assigned_resource_uid)
        self.tree_builder = ExportTreeBuilder()
        self.serializer = ScheduleSerializer(self.settings.export_namespace)

    # ==================== 가져오기 ====================

    def import_document(
        self,
        raw_stream: BinaryIO,
        users: Iterable[Optional[User]] = (),
    ) -> ConversionResult:
        """
        일정 문서를 읽어 작업 목록, 새 카테고리, 실패한 작업 ID를 반환합니다.

        Args:
            raw_stream: 업로드된 문서 스트림 (일반 XML 또는 gzip)
            users: 프로젝트에 할당 가능한 사용자 목록

        Raises:
            MalformedInputError: 스트림을 읽거나 파싱할 수 없는 경우
            SchemaError: Project 루트가 없는 경우
        """
        logger.info("[Converter] 가져오기 시작")
        start_time = datetime.now()

        stream = self.reader.read(raw_stream)
        tree = self.extractor.parse(stream)

        tracker_field_id = tree.find_tracker_field_id(self.settings.tracker_alias)
        if tracker_field_id is None:
            logger.info(
                f"[Converter] '{self.settings.tracker_alias}' 별칭의 확장 속성이 없어 트래커를 지정하지 않습니다"
            )

        tasks, unresolved_ids = self.task_extractor.extract(tree, tracker_field_id)
        tasks, categories = self.hierarchy.reconstruct(tasks)
        self.resolver.resolve(tree, tasks, users)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[Converter] 가져오기 완료: 작업 {len(tasks)}개, 카테고리 {len(categories)}개, "
            f"실패 {len(unresolved_ids)}개 ({elapsed:.2f}초)"
        )

        return ConversionResult(
            tasks=tasks,
            categories=categories,
            unresolved_ids=unresolved_ids,
        )

    def import_bytes(
        self,
        content: bytes,
        users: Iterable[Optional[User]] = (),
    ) -> ConversionResult:
        """바이트 데이터를 바로 가져올 때 사용하는 함수."""
        return self.import_document(self.reader.read_bytes(content), users)

    # ==================== 내보내기 ====================

    def export_document(
        self,
        project: Project,
        work_items: list[WorkItem],
        versions: list[Version],
        members: list[ProjectMember],
        filtered: bool = False,
        now: Optional[datetime] = None,
    ) -> ExportResult:
        """
        작업 항목 목록으로 일정 문서를 생성합니다.

        Args:
            project: 대상 프로젝트
            work_items: 이미 정렬된 작업 항목 목록
            versions: 프로젝트 버전 목록
            members: 프로젝트 구성원 목록
            filtered: 조회 조건으로 걸러진 목록인지 여부.
                True면 작업 항목이 참조하는 버전만 작업 뒤에 쓰고,
                False면 모든 버전을 작업 앞에 씁니다.
            now: 파일명에 사용할 시각
        """
        if not work_items:
            error = ExportInputError(
                "내보낼 작업 항목이 없습니다",
                details={"project_id": project.id},
            )
            logger.info(f"[Converter] {error.error_code} {error.message}: 빈 문서를 생성합니다")

        if filtered:
            referenced = {item.fixed_version_id for item in work_items}
            versions = [v for v in versions if v.id in referenced]

        nodes = self.tree_builder.build(work_items)
        result = self.serializer.serialize(
            project,
            nodes,
            versions,
            members,
            assignment_items=work_items,
            versions_first=not filtered,
            now=now,
        )
        logger.info(f"[Converter] 내보내기 완료: {result.filename}")
        return result


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_converter: Optional[ScheduleConverter] = None


def get_converter() -> ScheduleConverter:
    """ScheduleConverter 인스턴스를 반환합니다."""
    global _converter
    if _converter is None:
        _converter = ScheduleConverter()
    return _converter
