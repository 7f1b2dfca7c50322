"""내보내기(Export) 모델."""

from pydantic import BaseModel, Field

from .tracker import WorkItem


class ExportNode(BaseModel):
    """내보내기 트리의 노드. 내보내기 호출마다 새로 만들어지고 저장되지 않습니다."""
    work_item: WorkItem
    outline_number: str = Field(..., description="개요 번호 (예: 1.2)")
    outline_level: int = Field(..., description="개요 수준 (깊이 + 1)")
    position: int = Field(..., description="작업 순번 ID")

    @property
    def key(self) -> int:
        return self.work_item.id


class ExportResult(BaseModel):
    """생성된 일정 문서와 권장 파일명."""
    content: bytes
    filename: str
    task_count: int = 0
    milestone_count: int = 0
    resource_count: int = 0
    assignment_count: int = 0
