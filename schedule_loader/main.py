"""
일정 문서 변환 시스템의 메인 진입점 파일입니다.
웹 서버 애플리케이션을 생성하고 설정하는 역할을 담당합니다.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schedule_loader.config import get_settings
from schedule_loader.api.router import api_router
from schedule_loader.models import ErrorResponse
from schedule_loader.exceptions import (
    LoaderError,
    InputValidationError,
    MalformedInputError,
    SchemaError,
)

logger = logging.getLogger(__name__)

# 잘못된 입력 때문에 생기는 에러는 400, 나머지는 500
CLIENT_ERRORS = (InputValidationError, MalformedInputError, SchemaError)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션의 생명주기(시작과 종료)를 관리하는 함수입니다.
    """
    settings = get_settings()
    logger.info(f"Schedule Loader가 다음 주소에서 시작됩니다: {settings.host}:{settings.port}")
    logger.info(f"트래커 별칭: '{settings.tracker_alias}', 배치 크기: {settings.import_batch_size}")

    yield

    logger.info("Schedule Loader가 종료됩니다")


def create_app() -> FastAPI:
    """
    FastAPI 웹 애플리케이션을 생성하고 설정하는 함수입니다.

    주요 기능:
    1. 기본 앱 정보 설정 (제목, 설명 등)
    2. CORS 설정
    3. API 라우터 연결
    """
    settings = get_settings()

    app = FastAPI(
        title="Schedule Loader",
        description="MS Project XML 일정 문서와 작업 항목 간의 가져오기/내보내기",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 글로벌 예외 핸들러: 커스텀 예외를 구조화된 JSON 응답으로 변환
    @app.exception_handler(LoaderError)
    async def loader_error_handler(request: Request, exc: LoaderError):
        status_code = 400 if isinstance(exc, CLIENT_ERRORS) else 500
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error_code="ERR_INTERNAL",
                message="내부 서버 오류가 발생했습니다",
            ).model_dump(mode="json"),
        )

    # API 라우터 포함: /api/v1 주소 아래에 모든 기능을 연결합니다.
    app.include_router(api_router, prefix="/api/v1")

    return app


# 애플리케이션 인스턴스 생성
app = create_app()


@app.get("/")
async def root():
    """
    루트 엔드포인트: 서버의 기본 정보를 반환합니다.
    """
    return {
        "name": "Schedule Loader",
        "version": "1.0.0",
        "description": "MS Project XML 가져오기/내보내기",
        "docs": "/docs",
        "api": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "schedule_loader.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
