"""
가져오기(Import) 쪽 데이터 모델입니다.
일정 문서에서 읽어낸 작업, 선행 관계, 리소스 연결 정보를 정의합니다.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


# LinkLag 값은 0.1분 단위입니다. (8시간 = 4800)
LAG_UNITS_PER_DAY = 8 * 60 * 10


class PredecessorLink(BaseModel):
    """작업의 선행 관계 (PredecessorLink)."""
    predecessor_uid: Optional[int] = Field(None, description="선행 작업 UID")
    link_lag: int = Field(0, description="지연 값 (원본 LinkLag, 0.1분 단위)")

    @property
    def lag_days(self) -> float:
        """지연 일수 (1일 = 8시간 기준)."""
        return self.link_lag / LAG_UNITS_PER_DAY


class ParsedTask(BaseModel):
    """일정 문서에서 추출한 작업 한 건."""
    uid: int = Field(..., description="문서 내 고유 식별자")
    display_id: Optional[int] = Field(None, description="문서의 순번 ID")
    title: Optional[str] = Field(None, description="작업명")
    outline_level: Optional[int] = Field(None, description="개요 수준 (깊이), 없으면 None")
    outline_number: Optional[str] = Field(None, description="개요 번호 (예: 1.2.3)")
    parent_outline_number: Optional[str] = Field(None, description="상위 작업의 개요 번호")
    start_date: Optional[date] = Field(None, description="시작일")
    finish_date: Optional[date] = Field(None, description="종료일")
    priority: Optional[str] = Field(None, description="우선순위 (원본 숫자 문자열)")
    milestone: bool = Field(False, description="마일스톤 여부")
    percent_complete: int = Field(0, description="완료율 (%)")
    notes: Optional[str] = Field(None, description="메모")
    tracker_name: Optional[str] = Field(None, description="확장 속성에서 읽은 트래커 이름")
    category: str = Field("", description="상위 수준 0 행에서 물려받은 카테고리")
    predecessors: list[PredecessorLink] = Field(default_factory=list, description="선행 작업 목록")
    assigned_user_id: Optional[int] = Field(None, description="할당된 사용자 ID")


class ResourceBinding(BaseModel):
    """문서 리소스와 실제 사용자의 연결."""
    resource_uid: int = Field(..., description="문서 리소스 UID")
    name: str = Field(..., description="리소스 표시 이름")
    user_id: Optional[int] = Field(None, description="이름이 일치하는 사용자 ID")

    @property
    def is_bound(self) -> bool:
        return self.user_id is not None


class ConversionResult(BaseModel):
    """가져오기 결과: 작업 목록, 새로 발견된 카테고리, 실패한 작업 ID."""
    tasks: list[ParsedTask] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    unresolved_ids: list[Optional[int]] = Field(default_factory=list)

    @property
    def has_unresolved(self) -> bool:
        """일부 작업을 읽지 못했는지 여부 (부분 실패)."""
        return bool(self.unresolved_ids)
