"""Data model unit tests."""

import pytest

from schedule_loader.models import (
    ConversionResult,
    ImportBatchResult,
    ImportJob,
    ImportStatus,
    PredecessorLink,
    ProjectSnapshot,
    ResourceBinding,
    WorkItem,
)


class TestScheduleModels:
    def test_lag_days(self):
        assert PredecessorLink(predecessor_uid=1, link_lag=2400).lag_days == 0.5
        assert PredecessorLink().lag_days == 0

    def test_binding_is_bound(self):
        assert ResourceBinding(resource_uid=1, name="alice", user_id=7).is_bound
        assert not ResourceBinding(resource_uid=2, name="nobody").is_bound

    def test_conversion_result_partial(self):
        assert not ConversionResult().has_unresolved
        assert ConversionResult(unresolved_ids=[None]).has_unresolved


class TestTrackerModels:
    def test_is_child(self):
        assert WorkItem(id=2, subject="c", parent_id=1).is_child
        assert not WorkItem(id=1, subject="p").is_child

    def test_find_tracker(self, sample_project):
        assert sample_project.find_tracker("Bug").id == 2
        assert sample_project.find_tracker("bug") is None
        assert sample_project.find_tracker(None) is None

    def test_assignable_users_are_members_only(self, sample_snapshot):
        assert [u.login for u in sample_snapshot.assignable_users] == ["alice", "bob"]

    def test_next_work_item_id(self, sample_snapshot, sample_project):
        assert sample_snapshot.next_work_item_id() == 5
        assert ProjectSnapshot(project=sample_project).next_work_item_id() == 1


class TestImportJob:
    def _job(self, *errors):
        job = ImportJob(project_id=1, total_batches=len(errors))
        for index, error in enumerate(errors):
            job.add_batch(ImportBatchResult(
                batch_index=index,
                created_ids=[] if error else [index + 10],
                errors=[error] if error else [],
            ))
        return job

    def test_defaults(self):
        job = ImportJob(project_id=1)
        assert job.status == ImportStatus.PENDING
        assert job.batch_size == 30
        assert job.job_id

    @pytest.mark.parametrize(
        "errors, expected",
        [
            ((None, None), ImportStatus.COMPLETED),
            (("x", None), ImportStatus.PARTIALLY_FAILED),
            (("x", "y"), ImportStatus.FAILED),
        ],
    )
    def test_final_status(self, errors, expected):
        assert self._job(*errors).final_status() == expected

    def test_created_ids_across_batches(self):
        assert self._job(None, "x", None).created_ids == [10, 12]

    def test_progress(self):
        job = self._job(None, "x")
        job.total_batches = 4
        progress = job.get_progress()
        assert progress["completed_batches"] == 2
        assert progress["progress_percent"] == 50
        assert progress["created_count"] == 1
        assert progress["failed_batches"] == 1

    def test_update_status_touches_timestamp(self):
        job = ImportJob(project_id=1)
        before = job.updated_at
        job.update_status(ImportStatus.RUNNING)
        assert job.status == ImportStatus.RUNNING
        assert job.updated_at >= before
