"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from schedule_loader.api.endpoints import health, loader, jobs

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 일정 문서 가져오기/내보내기 엔드포인트 (/projects/{id}/loader/...)
api_router.include_router(
    loader.router,
    prefix="/projects",
    tags=["loader"]
)

# 가져오기 작업 상태 엔드포인트 (/loader/jobs)
api_router.include_router(
    jobs.router,
    prefix="/loader/jobs",
    tags=["jobs"]
)
