from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    # 가져오기(Import) 설정
    tracker_alias: str = "Tracker"  # 트래커 이름이 담긴 확장 속성의 별칭(Alias)
    not_assigned_resource_uid: int = -65535  # MS Project의 '미할당' 리소스 UID
    default_tracker_id: Optional[int] = None  # 트래커 이름을 찾지 못했을 때 사용할 기본 트래커

    # 대량 가져오기 설정: 이 개수 이하면 즉시 처리, 초과하면 배치로 나눠 백그라운드 처리
    instant_import_tasks: int = 30
    import_batch_size: int = 30

    # 내보내기(Export) 설정
    export_namespace: str = "http://schemas.microsoft.com/project"

    # 저장소 및 업로드 제한
    data_path: str = "data"
    max_file_size_mb: int = 20
    max_filename_length: int = 255

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["*"]

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()
