"""
이슈 트래커 쪽 데이터 모델입니다.
프로젝트, 사용자, 버전, 작업 항목(이슈) 등 외부 저장소가 소유하는 형태를 정의합니다.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """프로젝트에 할당 가능한 사용자."""
    id: int
    login: str
    firstname: str = ""
    lastname: str = ""
    mail: str = ""


class ProjectMember(BaseModel):
    """프로젝트 구성원 (내보내기 시 리소스가 됩니다)."""
    id: int = Field(..., description="구성원 ID")
    user_id: int = Field(..., description="사용자 ID")
    login: str = Field(..., description="사용자 로그인 이름")


class Tracker(BaseModel):
    """이슈 트래커 (버그, 기능 등)."""
    id: int
    name: str


class Version(BaseModel):
    """프로젝트 버전. 내보내기 시 마일스톤 작업이 됩니다."""
    id: int
    name: str
    description: str = ""
    created_on: datetime = Field(default_factory=datetime.now)
    effective_date: Optional[date] = Field(None, description="버전 적용일")


class WorkItem(BaseModel):
    """작업 항목 (이슈)."""
    id: int
    subject: str
    description: str = ""
    created_on: datetime = Field(default_factory=datetime.now)
    priority_name: Optional[str] = Field(None, description="우선순위 이름 (Normal, High 등)")
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    parent_id: Optional[int] = Field(None, description="상위 이슈 ID")
    depth: int = Field(0, description="계층 깊이 (최상위 = 0)")
    has_children: bool = Field(False, description="하위 이슈 존재 여부")
    fixed_version_id: Optional[int] = Field(None, description="대상 버전 ID")
    assigned_to_id: Optional[int] = Field(None, description="담당자 사용자 ID")
    done_ratio: int = Field(0, description="완료율 (%)")
    tracker_id: Optional[int] = None
    category: Optional[str] = None

    @property
    def is_child(self) -> bool:
        return self.parent_id is not None


class Project(BaseModel):
    """프로젝트."""
    id: int
    identifier: str
    name: str
    created_on: datetime = Field(default_factory=datetime.now)
    trackers: list[Tracker] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)

    def find_tracker(self, name: Optional[str]) -> Optional[Tracker]:
        """이름으로 트래커를 찾습니다."""
        if not name:
            return None
        return next((t for t in self.trackers if t.name == name), None)


class ProjectSnapshot(BaseModel):
    """저장소에 보관되는 프로젝트 단위 데이터 묶음."""
    project: Project
    users: list[User] = Field(default_factory=list)
    members: list[ProjectMember] = Field(default_factory=list)
    versions: list[Version] = Field(default_factory=list)
    work_items: list[WorkItem] = Field(default_factory=list)

    @property
    def assignable_users(self) -> list[User]:
        """구성원으로 등록된 사용자만 반환합니다."""
        member_ids = {m.user_id for m in self.members}
        return [u for u in self.users if u.id in member_ids]

    def next_work_item_id(self) -> int:
        return max((item.id for item in self.work_items), default=0) + 1
