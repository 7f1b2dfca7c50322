"""
일정 문서 직렬화기입니다.
내보내기 노드, 버전, 구성원으로 MS Project XML 문서를 생성합니다.

필드 값(제약 유형, 비용 발생 코드 등)은 데스크톱 일정 도구가 기대하는 상수를 그대로 사용합니다.
"""

import io
import logging
from datetime import date, datetime
from typing import Optional, Union
from xml.etree.ElementTree import Element, SubElement, ElementTree, indent

from schedule_loader.models import (
    ExportNode,
    ExportResult,
    Project,
    ProjectMember,
    Version,
    WorkItem,
)
from ..layer4_assignment import NOT_USER_ASSIGNED

logger = logging.getLogger(__name__)

MS_XML_FORMAT = "%Y-%m-%dT%H:%M:%S"
FILENAME_TIME_FORMAT = "%Y-%m-%d-%H-%M"

# 우선순위 이름 → MS Project 우선순위 값
PRIORITY_VALUES = {
    "Minimal": 100,
    "Low": 300,
    "Normal": 500,
    "High": 700,
    "Immediate": 900,
}

FIXED_COST_ACCRUAL_PRORATED = "3"
CONSTRAINT_AS_SOON_AS_POSSIBLE = "0"
CONSTRAINT_START_NO_EARLIER_THAN = "4"


def priority_value(priority_name: Optional[str]) -> Optional[int]:
    """알 수 없는 우선순위 이름은 None."""
    return PRIORITY_VALUES.get(priority_name)


def ms_xml_time(value: Optional[Union[date, datetime]]) -> Optional[str]:
    """날짜/시각을 MS Project XML 형식으로 변환합니다. 날짜는 자정으로 취급합니다."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return value.strftime(MS_XML_FORMAT)


def export_filename(project_name: str, now: Optional[datetime] = None) -> str:
    """'<프로젝트명>-YYYY-MM-DD-HH-MM.xml' 형식의 권장 파일명."""
    now = now or datetime.now()
    return f"{project_name}-{now.strftime(FILENAME_TIME_FORMAT)}.xml"


def _se(parent, tag, text=None):
    """SubElement shorthand."""
    el = SubElement(parent, tag)
    if text is not None:
        el.text = str(text)
    return el


class ScheduleSerializer:
    """MS Project XML 문서를 생성합니다."""

    def __init__(self, namespace: Optional[str] = None):
        self.namespace = namespace

    def serialize(
        self,
        project: Project,
        nodes: list[ExportNode],
        versions: list[Version],
        members: list[ProjectMember],
        assignment_items: Optional[list[WorkItem]] = None,
        versions_first: bool = False,
        now: Optional[datetime] = None,
    ) -> ExportResult:
        """
        문서를 생성합니다.

        Args:
            project: 대상 프로젝트 (루트 작업이 됩니다)
            nodes: 트리 빌더가 만든 노드 목록
            versions: 마일스톤으로 내보낼 버전 목록
            members: 리소스로 내보낼 프로젝트 구성원
            assignment_items: 할당을 만들 원본 작업 항목 (기본값: 노드의 작업 항목)
            versions_first: 마일스톤을 작업보다 먼저 쓸지 여부
            now: 파일명에 사용할 시각

        Returns:
            ExportResult: XML 바이트와 권장 파일명
        """
        if assignment_items is None:
            assignment_items = [node.work_item for node in nodes]

        root = Element("Project")
        if self.namespace:
            root.set("xmlns", self.namespace)
        _se(root, "Name", project.name)

        tasks_el = _se(root, "Tasks")
        self._write_root_task(tasks_el, project)

        parent_ids = {
            node.work_item.parent_id for node in nodes if node.work_item.parent_id is not None
        }
        used_issues: set[int] = set()
        task_count = 0

        if versions_first:
            self._write_versions(tasks_el, versions)
        for node in nodes:
            if self._write_task(tasks_el, node, parent_ids, used_issues):
                task_count += 1
        if not versions_first:
            self._write_versions(tasks_el, versions)

        self._write_resources(root, members)
        self._write_assignments(root, assignment_items)

        indent(root, space="  ")
        buffer = io.BytesIO()
        ElementTree(root).write(buffer, encoding="utf-8", xml_declaration=True)

        logger.info(
            f"[ScheduleSerializer] 문서 생성 완료: 작업 {task_count}개, "
            f"마일스톤 {len(versions)}개, 리소스 {len(members)}개, 할당 {len(assignment_items)}개"
        )

        return ExportResult(
            content=buffer.getvalue(),
            filename=export_filename(project.name, now),
            task_count=task_count,
            milestone_count=len(versions),
            resource_count=len(members),
            assignment_count=len(assignment_items),
        )

    def _write_root_task(self, tasks_el, project: Project):
        """프로젝트 자체를 나타내는 UID 0 작업."""
        t = _se(tasks_el, "Task")
        _se(t, "UID", "0")
        _se(t, "ID", "0")
        _se(t, "ConstraintType", CONSTRAINT_AS_SOON_AS_POSSIBLE)
        _se(t, "OutlineNumber", "0")
        _se(t, "OutlineLevel", "0")
        _se(t, "Name", project.name)
        _se(t, "Type", "1")
        _se(t, "CreateDate", ms_xml_time(project.created_on))

    def _write_task(self, tasks_el, node: ExportNode, parent_ids: set[int], used_issues: set[int]) -> bool:
        """작업 항목 하나를 씁니다. 이미 쓴 항목이면 건너뜁니다."""
        issue = node.work_item
        if issue.id in used_issues:
            return False
        used_issues.add(issue.id)

        t = _se(tasks_el, "Task")
        _se(t, "UID", issue.id)
        _se(t, "ID", node.position)
        _se(t, "Name", issue.subject)
        _se(t, "Notes", issue.description)
        _se(t, "CreateDate", ms_xml_time(issue.created_on))

        priority = priority_value(issue.priority_name)
        if priority is not None:
            _se(t, "Priority", priority)

        start = ms_xml_time(issue.start_date)
        if start:
            _se(t, "Start", start)
        finish = ms_xml_time(issue.due_date)
        if finish:
            _se(t, "Finish", finish)

        _se(t, "FixedCostAccrual", FIXED_COST_ACCRUAL_PRORATED)
        _se(t, "ConstraintType", CONSTRAINT_START_NO_EARLIER_THAN)
        if start:
            _se(t, "ConstraintDate", start)

        # 상위 이슈면 요약/중요/롤업/유형 = 1, 아니면 0
        parent = 1 if (issue.has_children or issue.id in parent_ids) else 0
        _se(t, "Summary", parent)
        _se(t, "Critical", parent)
        _se(t, "Rollup", parent)
        _se(t, "Type", parent)

        # TODO: 이슈 간 'precedes' 관계를 PredecessorLink로 내보내기 (현재는 대상 버전만 연결)
        if issue.fixed_version_id is not None:
            link = _se(t, "PredecessorLink")
            _se(link, "PredecessorUID", issue.fixed_version_id)

        _se(t, "WBS", node.outline_number)
        _se(t, "OutlineNumber", node.outline_number)
        _se(t, "OutlineLevel", node.outline_level)
        return True

    def _write_versions(self, tasks_el, versions: list[Version]):
        """버전을 마일스톤 작업으로 씁니다. ID/WBS/개요 번호는 별도의 순번을 사용합니다."""
        for sequence, version in enumerate(versions, start=1):
            t = _se(tasks_el, "Task")
            _se(t, "UID", version.id)
            _se(t, "ID", sequence)
            _se(t, "Name", version.name)
            _se(t, "Notes", version.description)
            _se(t, "CreateDate", ms_xml_time(version.created_on))
            effective = ms_xml_time(version.effective_date)
            if effective:
                _se(t, "Start", effective)
                _se(t, "Finish", effective)
            _se(t, "Milestone", "1")
            _se(t, "FixedCostAccrual", FIXED_COST_ACCRUAL_PRORATED)
            _se(t, "ConstraintType", CONSTRAINT_START_NO_EARLIER_THAN)
            if effective:
                _se(t, "ConstraintDate", effective)
            _se(t, "Summary", "1")
            _se(t, "Critical", "1")
            _se(t, "Rollup", "1")
            _se(t, "Type", "1")
            _se(t, "WBS", sequence)
            _se(t, "OutlineNumber", sequence)
            _se(t, "OutlineLevel", "1")

    def _write_resources(self, root, members: list[ProjectMember]):
        resources_el = _se(root, "Resources")
        r = _se(resources_el, "Resource")
        _se(r, "UID", "0")
        _se(r, "ID", "0")
        _se(r, "Type", "1")
        _se(r, "IsNull", "0")

        for member in members:
            r = _se(resources_el, "Resource")
            _se(r, "UID", member.user_id)
            _se(r, "ID", member.id)
            _se(r, "Name", member.login)
            _se(r, "Type", "1")
            _se(r, "IsNull", "0")
            _se(r, "MaxUnits", "1.0")

    def _write_assignments(self, root, work_items: list[WorkItem]):
        assignments_el = _se(root, "Assignments")
        for issue in work_items:
            a = _se(assignments_el, "Assignment")
            _se(a, "UID", issue.id)
            _se(a, "TaskUID", issue.id)
            resource_uid = issue.assigned_to_id if issue.assigned_to_id is not None else NOT_USER_ASSIGNED
            _se(a, "ResourceUID", resource_uid)
            _se(a, "PercentWorkComplete", issue.done_ratio)
            _se(a, "Units", "1")
