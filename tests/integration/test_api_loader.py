"""
일정 문서 가져오기/내보내기 API 통합 테스트.
저장소는 임시 디렉토리로 교체하여 분석, 생성, 내보내기, 작업 상태 조회를 확인합니다.
"""

import gzip
import io
from urllib.parse import quote

import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport

from schedule_loader.main import app
from schedule_loader.layers.layer2_schema import SchemaExtractor, text_of


@pytest.fixture
async def store(temp_store, sample_snapshot):
    await temp_store.save_snapshot(sample_snapshot)
    return temp_store


@pytest.fixture
async def client(store):
    transport = ASGITransport(app=app)
    with patch("schedule_loader.api.endpoints.loader.get_tracker_store", return_value=store), \
            patch("schedule_loader.api.endpoints.jobs.get_tracker_store", return_value=store):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


def _row(uid, **overrides):
    row = {"uid": uid, "title": f"Task {uid}", "import_flag": True, "tracker_name": "Feature"}
    row.update(overrides)
    return row


# ==================== analyze ====================

async def test_analyze_sample_document(client: AsyncClient, sample_xml_bytes):
    """샘플 문서를 분석하면 작업, 카테고리, 실패 ID를 반환해야 한다."""
    response = await client.post(
        "/api/v1/projects/1/loader/analyze",
        files={"file": ("plan.xml", sample_xml_bytes, "application/xml")},
    )

    assert response.status_code == 200

    data = response.json()
    assert data["filename"] == "plan.xml"
    assert [t["uid"] for t in data["tasks"]] == [2, 3, 5]
    assert data["categories"] == ["Build", "Design", "Website Relaunch"]
    assert data["new_categories"] == ["Build", "Website Relaunch"]
    assert data["unresolved_ids"] == [6]
    assert data["partial"] is True

    wireframes = data["tasks"][0]
    assert wireframes["category"] == "Design"
    assert wireframes["tracker_name"] == "Feature"
    assert wireframes["assigned_user_id"] == 7
    assert wireframes["start_date"] == "2024-03-04"


async def test_analyze_gzip_document(client: AsyncClient, sample_xml_bytes):
    response = await client.post(
        "/api/v1/projects/1/loader/analyze",
        files={"file": ("plan.xml.gz", gzip.compress(sample_xml_bytes), "application/gzip")},
    )

    assert response.status_code == 200
    assert len(response.json()["tasks"]) == 3


async def test_analyze_garbage_returns_400(client: AsyncClient):
    response = await client.post(
        "/api/v1/projects/1/loader/analyze",
        files={"file": ("plan.xml", b"\x01\x02 not a document", "application/xml")},
    )

    assert response.status_code == 400

    body = response.json()
    assert body["error_code"] == "ERR_READ_001"
    assert set(body) == {"error_code", "message", "details", "timestamp"}
    assert body["details"]["error"]


async def test_analyze_wrong_root_returns_400(client: AsyncClient):
    response = await client.post(
        "/api/v1/projects/1/loader/analyze",
        files={"file": ("plan.xml", b"<Schedule/>", "application/xml")},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_SCHEMA_001"


async def test_analyze_invalid_extension(client: AsyncClient, sample_xml_bytes):
    response = await client.post(
        "/api/v1/projects/1/loader/analyze",
        files={"file": ("plan.mpp", sample_xml_bytes, "application/octet-stream")},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_INPUT_001"


async def test_analyze_empty_file(client: AsyncClient):
    response = await client.post(
        "/api/v1/projects/1/loader/analyze",
        files={"file": ("plan.xml", b"", "application/xml")},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "빈 파일입니다"


async def test_analyze_unknown_project(client: AsyncClient, sample_xml_bytes):
    response = await client.post(
        "/api/v1/projects/99/loader/analyze",
        files={"file": ("plan.xml", sample_xml_bytes, "application/xml")},
    )

    assert response.status_code == 404


# ==================== create ====================

async def test_create_small_import(client: AsyncClient, store):
    """적은 수의 작업은 요청 안에서 바로 생성되어야 한다."""
    response = await client.post(
        "/api/v1/projects/1/loader/create",
        json={"tasks": [
            _row(1, outline_number="1", category="Build"),
            _row(2, outline_number="1.1", parent_outline_number="1", tracker_name="Bug"),
            _row(3, import_flag=False),
        ]},
    )

    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "completed"
    assert data["total_tasks"] == 2
    assert data["created_ids"] == [5, 6]

    snapshot = await store.get_snapshot(1)
    stored = {item.id: item for item in snapshot.work_items}
    assert stored[6].parent_id == 5
    assert stored[6].tracker_id == 2


async def test_create_nothing_selected(client: AsyncClient):
    response = await client.post(
        "/api/v1/projects/1/loader/create",
        json={"tasks": [_row(1, import_flag=False)]},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "선택된 작업이 없습니다"


async def test_create_without_default_tracker(client: AsyncClient):
    """트래커 이름이 맞지 않고 기본 트래커도 없으면 400을 반환해야 한다."""
    response = await client.post(
        "/api/v1/projects/1/loader/create",
        json={"tasks": [_row(1, tracker_name="Epic")]},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "유효한 기본 트래커가 설정되지 않았습니다"


async def test_create_large_import_and_poll_job(client: AsyncClient, store):
    """많은 작업은 배치로 처리되고, 작업 상태 API로 결과를 확인할 수 있어야 한다."""
    response = await client.post(
        "/api/v1/projects/1/loader/create",
        json={"tasks": [_row(i) for i in range(1, 46)]},
    )

    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "pending"
    assert data["total_batches"] == 2

    status = await client.get(f"/api/v1/loader/jobs/{data['job_id']}")
    assert status.status_code == 200

    job = status.json()
    assert job["status"] == "completed"
    assert job["completed_batches"] == 2
    assert job["progress_percent"] == 100
    assert len(job["created_ids"]) == 45
    assert job["notified_at"] is not None

    listing = await client.get("/api/v1/loader/jobs", params={"project_id": 1})
    assert listing.json()["total"] == 1


async def test_job_not_found(client: AsyncClient):
    response = await client.get("/api/v1/loader/jobs/missing")

    assert response.status_code == 404


# ==================== export ====================

async def test_export_all(client: AsyncClient):
    response = await client.get("/api/v1/projects/1/loader/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")

    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment; filename*=UTF-8''")
    assert quote("Website Relaunch-") in disposition

    tree = SchemaExtractor().parse(io.BytesIO(response.content))
    uids = [text_of(t, "UID") for t in tree.iter_tasks()]
    assert uids == ["0", "100", "101", "1", "4", "2", "3"]


async def test_export_selected_issues(client: AsyncClient):
    """issue_ids가 주어지면 그 순서대로 내보내고 참조된 버전만 뒤에 써야 한다."""
    response = await client.get("/api/v1/projects/1/loader/export", params={"issue_ids": "4,1,999"})

    assert response.status_code == 200

    tree = SchemaExtractor().parse(io.BytesIO(response.content))
    uids = [text_of(t, "UID") for t in tree.iter_tasks()]
    assert uids == ["0", "4", "1", "100"]


async def test_export_bad_issue_ids(client: AsyncClient):
    response = await client.get("/api/v1/projects/1/loader/export", params={"issue_ids": "1,x"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_INPUT_001"


async def test_export_unknown_project(client: AsyncClient):
    response = await client.get("/api/v1/projects/99/loader/export")

    assert response.status_code == 404
