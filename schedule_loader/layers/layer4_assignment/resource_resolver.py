"""
리소스/할당 해석기입니다.
문서의 리소스를 이름으로 실제 사용자와 연결하고,
할당(Assignment) 레코드를 따라 각 작업의 담당자를 지정합니다.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, Optional

from schedule_loader.exceptions import ResolutionMiss
from schedule_loader.models import ParsedTask, ResourceBinding, User
from ..layer2_schema import DocumentTree, text_of, lenient_int

logger = logging.getLogger(__name__)

NOT_USER_ASSIGNED = -65535


class ResourceResolver:
    """리소스 → 사용자 연결 및 작업 담당자 지정."""

    def __init__(self, not_assigned_uid: int = NOT_USER_ASSIGNED):
        self.not_assigned_uid = not_assigned_uid

    def collect_resources(self, tree: DocumentTree) -> dict[int, str]:
        """리소스 UID → 이름. 이름이 없는 리소스는 건너뜁니다."""
        resources: dict[int, str] = {}
        for node in tree.iter_resources():
            name = text_of(node, "Name")
            uid = lenient_int(text_of(node, "UID"))
            if not name or uid is None:
                continue
            resources[uid] = name
        return resources

    def build_user_directory(self, users: Iterable[Optional[User]]) -> dict[str, User]:
        """None을 제거하고 ID 기준으로 중복을 제거한 뒤 로그인 이름으로 색인합니다."""
        directory: dict[str, User] = {}
        seen_ids: set[int] = set()
        for user in users:
            if user is None or user.id in seen_ids:
                continue
            seen_ids.add(user.id)
            directory.setdefault(user.login, user)
        return directory

    def bind(
        self,
        resources: dict[int, str],
        users: Iterable[Optional[User]],
    ) -> dict[int, ResourceBinding]:
        """리소스 이름과 사용자 로그인이 정확히 일치하면 연결합니다."""
        directory = self.build_user_directory(users)
        bindings = {}
        for uid, name in resources.items():
            user = directory.get(name)
            bindings[uid] = ResourceBinding(
                resource_uid=uid,
                name=name,
                user_id=user.id if user else None,
            )
        return bindings

    def resolve(
        self,
        tree: DocumentTree,
        tasks: list[ParsedTask],
        users: Iterable[Optional[User]],
    ) -> list[ResourceBinding]:
        """
        할당 레코드를 읽어 작업의 assigned_user_id를 지정합니다.
        연결할 수 없는 할당은 조용히 건너뜁니다. 할당이 작업을 만들지는 않습니다.

        Returns:
            문서의 리소스 연결 목록
        """
        bindings = self.bind(self.collect_resources(tree), users)
        tasks_by_uid = {task.uid: task for task in tasks}

        assigned = 0
        for node in tree.iter_assignments():
            try:
                task, user_id = self._resolve_assignment(node, tasks_by_uid, bindings)
            except ResolutionMiss as e:
                logger.debug(f"[ResourceResolver] 할당 건너뜀: {e.message}")
                continue
            task.assigned_user_id = user_id
            if user_id is not None:
                assigned += 1

        logger.info(
            f"[ResourceResolver] 리소스 {len(bindings)}개 중 "
            f"{sum(1 for b in bindings.values() if b.is_bound)}개 사용자 연결, 할당 {assigned}건"
        )
        return list(bindings.values())

    def _resolve_assignment(
        self,
        node: ET.Element,
        tasks_by_uid: dict[int, ParsedTask],
        bindings: dict[int, ResourceBinding],
    ) -> tuple[ParsedTask, Optional[int]]:
        task_uid = lenient_int(text_of(node, "TaskUID"))
        task = tasks_by_uid.get(task_uid) if task_uid is not None else None
        if task is None:
            raise ResolutionMiss("알 수 없는 작업 참조", details={"task_uid": task_uid})

        resource_uid = lenient_int(text_of(node, "ResourceUID"))
        if resource_uid is None or resource_uid == self.not_assigned_uid:
            raise ResolutionMiss("미할당 리소스", details={"task_uid": task_uid})

        binding = bindings.get(resource_uid)
        return task, binding.user_id if binding else None
