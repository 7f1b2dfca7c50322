"""
일정 문서 가져오기/내보내기 API입니다.
업로드된 문서를 분석하고, 선택된 작업을 가져오고, 프로젝트를 일정 문서로 내보냅니다.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from schedule_loader.exceptions import InputValidationError
from schedule_loader.models import ImportTaskRequest, ProjectSnapshot
from schedule_loader.services import TaskImporter, get_converter, get_tracker_store
from schedule_loader.utils import (
    validate_filename,
    validate_file_size,
    validate_file_extension,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateImportRequest(BaseModel):
    """가져오기 요청 (분석 결과에서 편집한 작업 행 목록)"""
    tasks: List[ImportTaskRequest]


async def _get_snapshot(project_id: int) -> ProjectSnapshot:
    """프로젝트를 찾지 못하면 404를 반환합니다."""
    snapshot = await get_tracker_store().get_snapshot(project_id)
    if not snapshot:
        raise HTTPException(status_code=404, detail="프로젝트를 찾을 수 없습니다")
    return snapshot


def _parse_issue_ids(issue_ids: str) -> list[int]:
    """'3,1,2' → [3, 1, 2]"""
    try:
        return [int(part) for part in issue_ids.split(",") if part.strip()]
    except ValueError:
        raise InputValidationError(
            "issue_ids는 쉼표로 구분된 정수여야 합니다",
            details={"issue_ids": issue_ids},
        )


@router.post("/{project_id}/loader/analyze")
async def analyze_document(
    project_id: int,
    file: UploadFile = File(...),
) -> dict:
    """
    일정 문서 분석 API.
    일반 XML과 gzip 압축 XML을 모두 받으며, 가져올 작업 목록을 미리 보여줍니다.
    """
    filename = validate_filename(file.filename or "")
    validate_file_extension(filename)
    content = await file.read()
    validate_file_size(len(content))

    snapshot = await _get_snapshot(project_id)
    result = get_converter().import_bytes(content, snapshot.assignable_users)

    new_categories = [c for c in result.categories if c not in snapshot.project.categories]

    return {
        "message": f"{len(result.tasks)}개 작업을 읽었습니다",
        "filename": filename,
        "tasks": [task.model_dump(mode="json") for task in result.tasks],
        "categories": result.categories,
        "new_categories": new_categories,
        "unresolved_ids": result.unresolved_ids,
        "partial": result.has_unresolved,
    }


@router.post("/{project_id}/loader/create")
async def create_work_items(
    project_id: int,
    request: CreateImportRequest,
    background_tasks: BackgroundTasks,
) -> dict:
    """
    선택된 작업 가져오기 API.
    작업 수가 많으면 배치로 나누어 백그라운드에서 처리합니다.
    """
    await _get_snapshot(project_id)

    importer = TaskImporter(get_tracker_store())
    job = await importer.start_import(project_id, request.tasks, background_tasks)

    if job.batches:
        message = f"{len(job.created_ids)}개 작업을 가져왔습니다"
    else:
        message = "작업을 가져오는 중입니다. 완료되면 상태가 갱신됩니다"

    return {
        "job_id": job.job_id,
        "status": job.status.value,
        "message": message,
        "total_tasks": job.total_tasks,
        "total_batches": job.total_batches,
        "created_ids": job.created_ids,
    }


@router.get("/{project_id}/loader/export")
async def export_document(project_id: int, issue_ids: Optional[str] = None) -> Response:
    """
    프로젝트 내보내기 API.
    issue_ids가 주어지면 해당 이슈만 그 순서대로 내보내고, 참조된 버전만 마일스톤으로 씁니다.
    """
    snapshot = await _get_snapshot(project_id)

    if issue_ids:
        by_id = {item.id: item for item in snapshot.work_items}
        work_items = [by_id[i] for i in _parse_issue_ids(issue_ids) if i in by_id]
        filtered = True
    else:
        work_items = snapshot.work_items
        filtered = False

    result = get_converter().export_document(
        snapshot.project,
        work_items,
        snapshot.versions,
        snapshot.members,
        filtered=filtered,
    )

    return Response(
        content=result.content,
        media_type="application/xml",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.filename)}",
        },
    )
