"""공유 pytest fixture 모음."""

import pytest
from pathlib import Path
from datetime import date, datetime

from schedule_loader.config import Settings
from schedule_loader.models import (
    User,
    ProjectMember,
    Tracker,
    Version,
    WorkItem,
    Project,
    ProjectSnapshot,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _element(tag: str, fields: dict) -> str:
    body = "".join(f"<{k}>{v}</{k}>" for k, v in fields.items() if v is not None)
    return f"<{tag}>{body}</{tag}>"


@pytest.fixture
def make_schedule_xml():
    """
    필드 딕셔너리로 최소한의 일정 문서를 만드는 fixture.

    make_schedule_xml(tasks=[{"UID": 1, "Name": "A"}], resources=[...], assignments=[...])
    """
    def _make(tasks=(), resources=(), assignments=(), aliases=None, namespace=True) -> bytes:
        xmlns = ' xmlns="http://schemas.microsoft.com/project"' if namespace else ""
        parts = [f'<?xml version="1.0" encoding="UTF-8"?><Project{xmlns}><Name>Test</Name>']
        if aliases:
            parts.append("<ExtendedAttributes>")
            parts.extend(
                _element("ExtendedAttribute", {"FieldID": field_id, "Alias": alias})
                for field_id, alias in aliases.items()
            )
            parts.append("</ExtendedAttributes>")
        parts.append("<Tasks>")
        for task in tasks:
            task = dict(task)
            extra = task.pop("_raw", "")
            parts.append(_element("Task", task)[:-len("</Task>")] + extra + "</Task>")
        parts.append("</Tasks><Resources>")
        parts.extend(_element("Resource", r) for r in resources)
        parts.append("</Resources><Assignments>")
        parts.extend(_element("Assignment", a) for a in assignments)
        parts.append("</Assignments></Project>")
        return "".join(parts).encode("utf-8")

    return _make


@pytest.fixture
def sample_xml_bytes():
    """네임스페이스가 있는 샘플 일정 문서 (fixtures/sample_project.xml)."""
    return (FIXTURES_DIR / "sample_project.xml").read_bytes()


@pytest.fixture
def settings():
    """기본 트래커가 지정된 Settings fixture."""
    return Settings(default_tracker_id=1)


@pytest.fixture
def sample_users():
    """할당 가능한 사용자 목록."""
    return [
        User(id=7, login="alice", firstname="Alice", lastname="Kim"),
        User(id=8, login="bob", firstname="Bob", lastname="Lee"),
    ]


@pytest.fixture
def sample_project():
    """트래커 두 개를 가진 프로젝트."""
    return Project(
        id=1,
        identifier="relaunch",
        name="Website Relaunch",
        created_on=datetime(2024, 1, 2, 9, 0, 0),
        trackers=[Tracker(id=1, name="Feature"), Tracker(id=2, name="Bug")],
        categories=["Design"],
    )


@pytest.fixture
def sample_versions():
    return [
        Version(id=100, name="v1.0", created_on=datetime(2024, 1, 2), effective_date=date(2024, 4, 1)),
        Version(id=101, name="v1.1", created_on=datetime(2024, 1, 2)),
    ]


@pytest.fixture
def sample_members():
    return [
        ProjectMember(id=11, user_id=7, login="alice"),
        ProjectMember(id=12, user_id=8, login="bob"),
    ]


@pytest.fixture
def sample_work_items():
    """상위 이슈 하나와 하위 이슈 둘, 독립 이슈 하나."""
    return [
        WorkItem(id=1, subject="Design", depth=0, has_children=True, priority_name="High",
                 start_date=date(2024, 3, 4), due_date=date(2024, 3, 8), fixed_version_id=100),
        WorkItem(id=2, subject="Wireframes", parent_id=1, depth=1, assigned_to_id=7, done_ratio=50),
        WorkItem(id=3, subject="Mockups", parent_id=1, depth=1),
        WorkItem(id=4, subject="Hosting", depth=0, priority_name="Unknown"),
    ]


@pytest.fixture
def sample_snapshot(sample_project, sample_users, sample_members, sample_versions, sample_work_items):
    """ProjectSnapshot fixture. 사용자 9는 구성원이 아닙니다."""
    return ProjectSnapshot(
        project=sample_project,
        users=sample_users + [User(id=9, login="carol")],
        members=sample_members,
        versions=sample_versions,
        work_items=sample_work_items,
    )


@pytest.fixture
def temp_store(tmp_path):
    """임시 디렉토리 기반 TrackerStore fixture."""
    from schedule_loader.services.file_storage import TrackerStore
    return TrackerStore(base_path=str(tmp_path))


@pytest.fixture
def converter(settings):
    """ScheduleConverter fixture."""
    from schedule_loader.services.converter import ScheduleConverter
    return ScheduleConverter(settings)
