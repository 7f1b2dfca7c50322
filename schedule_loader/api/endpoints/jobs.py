"""
가져오기 작업(Job) 상태 조회 API입니다.
배치로 나뉘어 백그라운드에서 처리되는 가져오기의 진행 상황을 확인합니다.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from schedule_loader.services import get_tracker_store

router = APIRouter()


@router.get("/{job_id}")
async def get_job_status(job_id: str) -> dict:
    """
    현재 가져오기 진행 상태를 확인하는 API.

    반환 정보:
    - 상태, 완료된 배치 수, 진행률 (%)
    - 생성된 작업 항목 ID
    - 에러 메시지 (있을 경우)
    """
    job = await get_tracker_store().get_job(job_id)

    if not job:
        raise HTTPException(status_code=404, detail="작업을 찾을 수 없습니다")

    return {
        "job_id": job.job_id,
        "project_id": job.project_id,
        **job.get_progress(),
        "created_ids": job.created_ids,
        "error": job.error_message,
        "notified_at": job.notified_at.isoformat() if job.notified_at else None,
        "created_at": job.created_at.isoformat(),
        "updated_at": job.updated_at.isoformat(),
    }


@router.get("")
async def list_jobs(
    skip: int = 0,
    limit: int = 20,
    project_id: Optional[int] = None,
) -> dict:
    """전체 가져오기 작업 목록 조회 API"""
    jobs = await get_tracker_store().list_jobs(skip=skip, limit=limit, project_id=project_id)

    return {
        "total": len(jobs),
        "jobs": [
            {
                "job_id": job.job_id,
                "project_id": job.project_id,
                "status": job.status.value,
                "total_tasks": job.total_tasks,
                "created_at": job.created_at.isoformat(),
            }
            for job in jobs
        ],
    }
