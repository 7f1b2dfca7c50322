"""
가져오기 작업(Job) 관련 데이터 모델입니다.
선택된 작업 행, 배치 결과, 작업 상태와 진행률을 정의합니다.
"""

from enum import Enum
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field
import uuid


class ImportStatus(str, Enum):
    """
    가져오기 작업 진행 상태입니다.
    """

    PENDING = "pending"                    # 대기 중 (배치가 예약됨)
    RUNNING = "running"                    # 배치 처리 중
    COMPLETED = "completed"                # 완료됨
    PARTIALLY_FAILED = "partially_failed"  # 일부 배치 실패
    FAILED = "failed"                      # 실패함


class ImportTaskRequest(BaseModel):
    """분석 결과에서 사용자가 선택/수정한 작업 행 하나."""

    uid: int
    title: str = ""
    import_flag: bool = Field(False, description="가져오기 대상 여부")
    tracker_name: Optional[str] = None
    category: str = ""
    start_date: Optional[date] = None
    finish_date: Optional[date] = None
    priority: Optional[str] = None
    percent_complete: int = 0
    notes: Optional[str] = None
    assigned_user_id: Optional[int] = None
    outline_level: Optional[int] = None
    outline_number: Optional[str] = None
    parent_outline_number: Optional[str] = None
    milestone: bool = False


class ImportBatchResult(BaseModel):
    """배치 하나의 처리 결과입니다."""

    batch_index: int
    created_ids: list[int] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=datetime.now)

    @property
    def succeeded(self) -> bool:
        return not self.errors


class ImportJob(BaseModel):
    """
    하나의 가져오기 요청을 나타내는 클래스입니다.
    작업 수가 많으면 여러 배치로 나뉘어 처리됩니다.
    """

    job_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="작업 고유 ID"
    )
    project_id: int
    status: ImportStatus = ImportStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    total_tasks: int = 0
    batch_size: int = 30
    total_batches: int = 0
    batches: list[ImportBatchResult] = Field(default_factory=list)

    error_message: Optional[str] = None
    notified_at: Optional[datetime] = None

    def update_status(self, status: ImportStatus):
        """작업 상태 업데이트"""
        self.status = status
        self.updated_at = datetime.now()

    def add_batch(self, result: ImportBatchResult):
        """배치 결과 저장"""
        self.batches.append(result)
        self.updated_at = datetime.now()

    @property
    def created_ids(self) -> list[int]:
        return [issue_id for batch in self.batches for issue_id in batch.created_ids]

    def final_status(self) -> ImportStatus:
        """모든 배치 결과를 보고 최종 상태를 결정합니다."""
        failed = [b for b in self.batches if not b.succeeded]
        if not failed:
            return ImportStatus.COMPLETED
        if len(failed) == len(self.batches):
            return ImportStatus.FAILED
        return ImportStatus.PARTIALLY_FAILED

    def get_progress(self) -> dict:
        """현재 진행률 정보를 계산하여 반환합니다."""
        done = len(self.batches)
        total = self.total_batches or 1
        return {
            "status": self.status.value,
            "completed_batches": done,
            "total_batches": self.total_batches,
            "progress_percent": int((done / total) * 100) if self.total_batches else 100,
            "created_count": len(self.created_ids),
            "failed_batches": sum(1 for b in self.batches if not b.succeeded),
        }
