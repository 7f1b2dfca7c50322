"""ResourceResolver unit tests."""

import io

import pytest

from schedule_loader.models import ParsedTask, User
from schedule_loader.layers.layer2_schema import SchemaExtractor
from schedule_loader.layers.layer4_assignment import ResourceResolver, NOT_USER_ASSIGNED


def _tree(content: bytes):
    return SchemaExtractor().parse(io.BytesIO(content))


@pytest.fixture
def resolver():
    return ResourceResolver()


class TestBind:
    def test_exact_login_match(self, resolver, sample_users):
        bindings = resolver.bind({1: "alice", 2: "Alice"}, sample_users)
        assert bindings[1].user_id == 7
        assert bindings[1].is_bound
        assert bindings[2].user_id is None
        assert not bindings[2].is_bound

    def test_none_users_are_ignored(self, resolver):
        bindings = resolver.bind({1: "bob"}, [None, User(id=8, login="bob"), None])
        assert bindings[1].user_id == 8

    def test_duplicate_users_keep_first(self, resolver):
        directory = resolver.build_user_directory([
            User(id=8, login="bob"),
            User(id=8, login="bob"),
            User(id=9, login="bob"),
        ])
        assert directory["bob"].id == 8


class TestResolve:
    def test_sentinel_scenario(self, resolver, make_schedule_xml, sample_users):
        content = make_schedule_xml(
            tasks=[{"UID": 1}, {"UID": 2}],
            resources=[{"UID": 1, "Name": "alice"}],
            assignments=[
                {"TaskUID": 1, "ResourceUID": 1},
                {"TaskUID": 2, "ResourceUID": NOT_USER_ASSIGNED},
            ],
        )
        tasks = [ParsedTask(uid=1), ParsedTask(uid=2)]
        resolver.resolve(_tree(content), tasks, sample_users)

        assigned = [t for t in tasks if t.assigned_user_id is not None]
        assert len(assigned) == 1
        assert assigned[0].uid == 1
        assert assigned[0].assigned_user_id == 7
        assert tasks[1].assigned_user_id is None

    def test_unknown_resource_name_leaves_task_unassigned(self, resolver, make_schedule_xml, sample_users):
        content = make_schedule_xml(
            resources=[{"UID": 3, "Name": "Contractor"}],
            assignments=[{"TaskUID": 1, "ResourceUID": 3}],
        )
        tasks = [ParsedTask(uid=1)]
        bindings = resolver.resolve(_tree(content), tasks, sample_users)
        assert tasks[0].assigned_user_id is None
        assert [(b.resource_uid, b.is_bound) for b in bindings] == [(3, False)]

    def test_orphan_assignment_creates_nothing(self, resolver, make_schedule_xml, sample_users):
        content = make_schedule_xml(
            resources=[{"UID": 1, "Name": "alice"}],
            assignments=[{"TaskUID": 99, "ResourceUID": 1}],
        )
        tasks = [ParsedTask(uid=1)]
        resolver.resolve(_tree(content), tasks, sample_users)
        assert len(tasks) == 1
        assert tasks[0].assigned_user_id is None

    def test_unnamed_resource_is_skipped(self, resolver, make_schedule_xml):
        content = make_schedule_xml(resources=[{"UID": 0}, {"UID": 1, "Name": "alice"}])
        assert resolver.collect_resources(_tree(content)) == {1: "alice"}

    def test_custom_sentinel(self, make_schedule_xml, sample_users):
        content = make_schedule_xml(
            resources=[{"UID": -1, "Name": "alice"}],
            assignments=[{"TaskUID": 1, "ResourceUID": -1}],
        )
        tasks = [ParsedTask(uid=1)]
        ResourceResolver(not_assigned_uid=-1).resolve(_tree(content), tasks, sample_users)
        assert tasks[0].assigned_user_id is None

    def test_sample_document(self, resolver, sample_xml_bytes, sample_users):
        tasks = [ParsedTask(uid=uid) for uid in (2, 3, 5)]
        resolver.resolve(_tree(sample_xml_bytes), tasks, sample_users)
        assert {t.uid: t.assigned_user_id for t in tasks} == {2: 7, 3: None, 5: None}

    def test_oversized_references_are_skipped(self, resolver, make_schedule_xml, sample_users):
        content = make_schedule_xml(
            resources=[{"UID": 1, "Name": "alice"}],
            assignments=[
                {"TaskUID": "1" * 5000, "ResourceUID": 1},
                {"TaskUID": 1, "ResourceUID": "2" * 5000},
                {"TaskUID": 2, "ResourceUID": 1},
            ],
        )
        tasks = [ParsedTask(uid=1), ParsedTask(uid=2)]
        resolver.resolve(_tree(content), tasks, sample_users)
        assert {t.uid: t.assigned_user_id for t in tasks} == {1: None, 2: 7}
