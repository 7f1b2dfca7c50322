"""
가져오기 서비스입니다.
분석 결과에서 선택된 작업 행을 작업 항목(이슈)으로 만들어 저장소에 기록합니다.

작업 수가 적으면 요청 안에서 바로 처리하고,
많으면 고정 크기 배치로 나누어 백그라운드 작업으로 처리한 뒤 완료 알림 작업을 실행합니다.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import BackgroundTasks

from schedule_loader.config import Settings, get_settings
from schedule_loader.exceptions import InputValidationError, LoaderError
from schedule_loader.models import (
    ImportBatchResult,
    ImportJob,
    ImportStatus,
    ImportTaskRequest,
    Project,
    WorkItem,
)
from schedule_loader.layers.layer2_schema import lenient_int
from .file_storage import TrackerStore

logger = logging.getLogger(__name__)

# MS Project 우선순위 값 상한 → 트래커 우선순위 이름
PRIORITY_THRESHOLDS = [
    (199, "Minimal"),
    (399, "Low"),
    (599, "Normal"),
    (799, "High"),
]


def priority_name(raw: Optional[str]) -> Optional[str]:
    """'500' → 'Normal'. 숫자가 아니면 None."""
    value = lenient_int(raw)
    if value is None:
        return None
    for upper, name in PRIORITY_THRESHOLDS:
        if value <= upper:
            return name
    return "Immediate"


class TaskImporter:
    """선택된 작업 행을 작업 항목으로 가져옵니다."""

    def __init__(self, store: TrackerStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    def build_tasks_to_import(self, rows: list[ImportTaskRequest]) -> list[ImportTaskRequest]:
        """가져오기 대상으로 표시된 행만 남깁니다."""
        return [row for row in rows if row.import_flag]

    def resolve_tracker_id(self, project: Project, tracker_name: Optional[str]) -> int:
        """
        트래커 이름으로 트래커를 찾고, 없으면 기본 트래커를 사용합니다.

        Raises:
            InputValidationError: 이름도 맞지 않고 기본 트래커도 없는 경우
        """
        tracker = project.find_tracker(tracker_name)
        if tracker:
            return tracker.id
        if self.settings.default_tracker_id is None:
            raise InputValidationError(
                "유효한 기본 트래커가 설정되지 않았습니다",
                details={"tracker_name": tracker_name},
            )
        return self.settings.default_tracker_id

    def to_work_items(self, rows: list[ImportTaskRequest], project: Project) -> list[WorkItem]:
        """
        작업 행을 새 작업 항목으로 변환합니다.
        id는 음수 임시 키이며, 상위 작업은 같은 묶음 안에서 개요 번호로 찾습니다.
        """
        temp_ids: dict[str, int] = {}
        for index, row in enumerate(rows):
            if row.outline_number:
                temp_ids.setdefault(row.outline_number, -(index + 1))

        depths: dict[int, int] = {}
        items = []
        for index, row in enumerate(rows):
            temp_id = -(index + 1)
            parent_id = temp_ids.get(row.parent_outline_number) if row.parent_outline_number else None
            depth = depths.get(parent_id, -1) + 1 if parent_id is not None else 0
            depths[temp_id] = depth

            items.append(WorkItem(
                id=temp_id,
                subject=row.title,
                description=row.notes or "",
                priority_name=priority_name(row.priority),
                start_date=row.start_date,
                due_date=row.finish_date,
                parent_id=parent_id,
                depth=depth,
                assigned_to_id=row.assigned_user_id,
                done_ratio=row.percent_complete,
                tracker_id=self.resolve_tracker_id(project, row.tracker_name),
                category=row.category or None,
            ))
        return items

    def plan_batches(self, rows: list[ImportTaskRequest]) -> list[list[ImportTaskRequest]]:
        """고정 크기 배치로 나눕니다."""
        size = max(self.settings.import_batch_size, 1)
        return [rows[i:i + size] for i in range(0, len(rows), size)]

    async def import_tasks(self, project_id: int, rows: list[ImportTaskRequest]) -> list[int]:
        """작업 행을 바로 작업 항목으로 만듭니다."""
        snapshot = await self.store.get_snapshot(project_id)
        if snapshot is None:
            raise InputValidationError(
                f"프로젝트를 찾을 수 없습니다: {project_id}",
                details={"project_id": project_id},
            )
        items = self.to_work_items(rows, snapshot.project)
        return await self.store.create_work_items(project_id, items)

    async def start_import(
        self,
        project_id: int,
        rows: list[ImportTaskRequest],
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> ImportJob:
        """
        가져오기를 시작합니다.

        - 선택된 행이 없으면 InputValidationError ("선택된 작업 없음")
        - 설정된 즉시 처리 개수 이하면 바로 가져오고 완료된 Job을 반환
        - 그보다 많으면 배치별 백그라운드 작업과 완료 알림 작업을 예약하고 대기 Job을 반환
        """
        selected = self.build_tasks_to_import(rows)
        if not selected:
            raise InputValidationError("선택된 작업이 없습니다")

        snapshot = await self.store.get_snapshot(project_id)
        if snapshot is None:
            raise InputValidationError(
                f"프로젝트를 찾을 수 없습니다: {project_id}",
                details={"project_id": project_id},
            )
        # 배치를 예약하기 전에 트래커를 모두 확인합니다.
        for row in selected:
            self.resolve_tracker_id(snapshot.project, row.tracker_name)

        batches = self.plan_batches(selected)
        job = ImportJob(
            project_id=project_id,
            total_tasks=len(selected),
            batch_size=self.settings.import_batch_size,
            total_batches=len(batches),
        )

        if len(selected) <= self.settings.instant_import_tasks or background_tasks is None:
            logger.info(f"[TaskImporter] 작업 {len(selected)}개 즉시 가져오기")
            job.total_batches = 1
            created = await self.import_tasks(project_id, selected)
            job.add_batch(ImportBatchResult(batch_index=0, created_ids=created))
            job.update_status(ImportStatus.COMPLETED)
            await self.store.save_job(job)
            return job

        await self.store.save_job(job)
        for index, batch in enumerate(batches):
            background_tasks.add_task(self.run_batch, job.job_id, index, batch)
        background_tasks.add_task(self.notify_finished, job.job_id)

        logger.info(
            f"[TaskImporter] 작업 {len(selected)}개를 {len(batches)}개 배치로 예약 (Job {job.job_id})"
        )
        return job

    async def run_batch(self, job_id: str, batch_index: int, rows: list[ImportTaskRequest]):
        """배치 하나를 처리하는 백그라운드 함수. 실패해도 다른 배치에는 영향을 주지 않습니다."""
        job = await self.store.get_job(job_id)
        if not job:
            logger.error(f"[TaskImporter] 작업을 찾을 수 없음: {job_id}")
            return

        job.update_status(ImportStatus.RUNNING)
        result = ImportBatchResult(batch_index=batch_index)
        try:
            result.created_ids = await self.import_tasks(job.project_id, rows)
        except LoaderError as e:
            logger.warning(f"[TaskImporter] 배치 {batch_index} 실패: {e.message}")
            result.errors.append(e.message)
        except Exception as e:
            logger.error(f"[TaskImporter] 배치 {batch_index} 처리 중 에러: {e}", exc_info=True)
            result.errors.append(str(e))

        job.add_batch(result)
        await self.store.update_job(job)

    async def notify_finished(self, job_id: str):
        """모든 배치가 끝난 뒤 최종 상태를 기록합니다."""
        job = await self.store.get_job(job_id)
        if not job:
            logger.error(f"[TaskImporter] 작업을 찾을 수 없음: {job_id}")
            return

        job.update_status(job.final_status())
        failed = [b.batch_index for b in job.batches if not b.succeeded]
        if failed:
            job.error_message = f"{len(failed)}개 배치 실패: {failed}"
        job.notified_at = datetime.now()
        await self.store.update_job(job)

        logger.info(
            f"[TaskImporter] 가져오기 완료 알림: Job {job_id}, 상태 {job.status.value}, "
            f"생성 {len(job.created_ids)}개"
        )
