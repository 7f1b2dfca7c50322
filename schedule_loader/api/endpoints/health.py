"""
헬스 체크(Health Check) 엔드포인트입니다.
서버가 살아서 정상적으로 응답하는지 확인하는 용도입니다.
"""

from fastapi import APIRouter

from schedule_loader.config import get_settings

router = APIRouter()


@router.get("")
async def health_check():
    """
    기본 상태 확인 함수.
    서버가 켜져 있으면 {"status": "healthy"}를 반환합니다.
    """
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail():
    """
    상세 상태 확인 함수.
    가져오기/내보내기에 쓰이는 설정 정보도 같이 보여줍니다.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "config": {
            "tracker_alias": settings.tracker_alias,
            "default_tracker_configured": settings.default_tracker_id is not None,
            "instant_import_tasks": settings.instant_import_tasks,
            "import_batch_size": settings.import_batch_size,
        }
    }
