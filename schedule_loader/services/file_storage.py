"""
파일 기반 트래커 저장소 서비스입니다.
데이터베이스 대신 파일 시스템(폴더와 파일)을 사용하여 데이터를 저장하고 관리합니다.

관리하는 데이터:
1. 프로젝트 스냅샷 (프로젝트, 사용자, 구성원, 버전, 작업 항목)
2. 가져오기 작업 상태 정보 (Jobs)
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, TypeVar, Type

import aiofiles
from pydantic import BaseModel

from schedule_loader.config import get_settings
from schedule_loader.models import ImportJob, ProjectSnapshot, WorkItem
from schedule_loader.exceptions import StorageError

logger = logging.getLogger(__name__)


T = TypeVar("T", bound=BaseModel)


class TrackerStore:
    """JSON 파일 기반의 단순 트래커 저장소 클래스입니다."""

    def __init__(self, base_path: str = "data"):
        # 기본 저장 경로 설정 (기본값: data 폴더)
        self.base_path = Path(base_path)
        self.projects_path = self.base_path / "projects"
        self.jobs_path = self.base_path / "jobs"

        # 같은 프로젝트에 대한 동시 쓰기를 직렬화합니다.
        # 프로젝트 ID마다 잠금 하나만 두므로 크기는 프로젝트 수를 넘지 않습니다.
        self._locks: dict[int, asyncio.Lock] = {}

        self._ensure_directories()

    def _ensure_directories(self):
        """저장소 폴더 생성 함수"""
        for path in [self.projects_path, self.jobs_path]:
            path.mkdir(parents=True, exist_ok=True)

    def _lock_for(self, project_id: int) -> asyncio.Lock:
        if project_id not in self._locks:
            self._locks[project_id] = asyncio.Lock()
        return self._locks[project_id]

    # ==================== 프로젝트 관련 기능 ====================

    async def save_snapshot(self, snapshot: ProjectSnapshot) -> int:
        """프로젝트 스냅샷을 파일로 저장합니다."""
        file_path = self.projects_path / f"{snapshot.project.id}.json"
        await self._save_model(file_path, snapshot)
        return snapshot.project.id

    async def get_snapshot(self, project_id: int) -> Optional[ProjectSnapshot]:
        """ID로 프로젝트 스냅샷을 불러옵니다."""
        file_path = self.projects_path / f"{project_id}.json"
        return await self._load_model(file_path, ProjectSnapshot)

    async def create_work_items(
        self,
        project_id: int,
        new_items: list[WorkItem],
    ) -> list[int]:
        """
        새 작업 항목을 저장하고 부여된 ID 목록을 반환합니다.

        전달된 항목의 id는 같은 묶음 안에서의 임시 키(음수)로만 사용됩니다.
        parent_id가 임시 키를 가리키면 새로 부여된 ID로 바꿉니다.
        처음 보는 카테고리는 프로젝트 카테고리 목록에 추가합니다.
        """
        async with self._lock_for(project_id):
            snapshot = await self.get_snapshot(project_id)
            if snapshot is None:
                raise StorageError(
                    f"프로젝트를 찾을 수 없습니다: {project_id}",
                    details={"project_id": project_id},
                )

            next_id = snapshot.next_work_item_id()
            id_map: dict[int, int] = {}
            for item in new_items:
                id_map[item.id] = next_id
                next_id += 1

            created = []
            for item in new_items:
                parent_id = id_map.get(item.parent_id, item.parent_id)
                stored = item.model_copy(update={"id": id_map[item.id], "parent_id": parent_id})
                snapshot.work_items.append(stored)
                created.append(stored.id)

                if stored.category and stored.category not in snapshot.project.categories:
                    snapshot.project.categories.append(stored.category)

            parent_ids = {w.parent_id for w in snapshot.work_items if w.parent_id is not None}
            for item in snapshot.work_items:
                if item.id in parent_ids:
                    item.has_children = True

            await self.save_snapshot(snapshot)

        logger.info(f"[TrackerStore] 프로젝트 {project_id}: 작업 항목 {len(created)}개 생성")
        return created

    # ==================== 가져오기 작업(Job) 관련 기능 ====================

    async def save_job(self, job: ImportJob) -> str:
        """작업 상태 정보를 저장합니다."""
        file_path = self.jobs_path / f"{job.job_id}.json"
        await self._save_model(file_path, job)
        return job.job_id

    async def get_job(self, job_id: str) -> Optional[ImportJob]:
        """작업 ID로 상태 정보를 조회합니다."""
        file_path = self.jobs_path / f"{job_id}.json"
        return await self._load_model(file_path, ImportJob)

    async def update_job(self, job: ImportJob) -> bool:
        """작업 상태를 업데이트합니다."""
        file_path = self.jobs_path / f"{job.job_id}.json"
        job.updated_at = datetime.now()
        await self._save_model(file_path, job)
        return True

    async def list_jobs(
        self,
        skip: int = 0,
        limit: int = 20,
        project_id: Optional[int] = None,
    ) -> list[ImportJob]:
        """작업 목록을 최신순으로 조회합니다."""
        jobs = []
        files = sorted(
            self.jobs_path.glob("*.json"),
            key=lambda f: f.stat().st_mtime,
            reverse=True
        )

        for file_path in files:
            job = await self._load_model(file_path, ImportJob)
            if job:
                if project_id is None or job.project_id == project_id:
                    jobs.append(job)

        return jobs[skip:skip + limit]

    # ==================== 내부 도우미 함수들 ====================

    async def _save_model(self, file_path: Path, model: BaseModel):
        """데이터 모델을 JSON 파일로 저장하는 공통 함수"""
        try:
            async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
                await f.write(model.model_dump_json(indent=2))
        except OSError as e:
            logger.error(f"파일 저장 실패 {file_path}: {e}", exc_info=True)
            raise StorageError(
                f"파일 저장에 실패했습니다: {file_path.name}",
                details={"path": str(file_path), "error": str(e)},
            )

    async def _load_model(self, file_path: Path, model_class: Type[T]) -> Optional[T]:
        """JSON 파일을 읽어서 데이터 모델로 변환하는 공통 함수"""
        if not file_path.exists():
            return None

        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            return model_class.model_validate_json(content)
        except Exception as e:
            logger.error(f"파일 로딩 에러 {file_path}: {e}", exc_info=True)
            return None


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_tracker_store: Optional[TrackerStore] = None


def get_tracker_store() -> TrackerStore:
    """TrackerStore 인스턴스를 반환합니다."""
    global _tracker_store
    if _tracker_store is None:
        _tracker_store = TrackerStore(get_settings().data_path)
    return _tracker_store
