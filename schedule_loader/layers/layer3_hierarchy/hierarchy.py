"""
계층 재구성기입니다.
UID 순으로 정렬된 평면 작업 목록을 한 번 훑으면서
개요 수준 0 행을 카테고리 경계로 삼아 나머지 작업에 카테고리를 물려줍니다.
개요 수준이 없는 작업은 경계가 아니며 현재 카테고리를 그대로 물려받습니다.

명시적인 부모/자식 트리는 만들지 않습니다.
더 깊은 수준의 정보(outline_level, outline_number)는 데이터로 그대로 남깁니다.
"""

import logging

from schedule_loader.models import ParsedTask

logger = logging.getLogger(__name__)

PROJECT_ROOT_UID = 0
CATEGORY_LEVEL = 0


def category_label(title) -> str:
    """카테고리 이름: 앞뒤 공백과 끝의 콜론 하나를 제거합니다."""
    if title is None:
        return ""
    label = title.strip()
    # 일부 프로젝트 파일은 요약 작업 이름 끝에 ':'를 붙입니다.
    if label.endswith(":"):
        label = label[:-1]
    return label


class HierarchyReconstructor:
    """평면 작업 목록에서 카테고리 구조를 추론합니다."""

    def reconstruct(self, tasks: list[ParsedTask]) -> tuple[list[ParsedTask], list[str]]:
        """
        Args:
            tasks: 추출된 평면 작업 목록 (순서 무관)

        Returns:
            (카테고리가 지정된 작업 목록, 정렬/중복 제거된 카테고리 목록)
        """
        ordered = sorted(tasks, key=lambda t: t.uid)

        all_categories: list[str] = []
        kept: list[ParsedTask] = []
        current = ""

        for task in ordered:
            if task.outline_level == CATEGORY_LEVEL:
                current = category_label(task.title)
                all_categories.append(current)
                continue
            # 프로젝트 자체를 나타내는 UID 0 행은 작업으로 돌려주지 않습니다.
            if task.uid == PROJECT_ROOT_UID:
                continue
            task.category = current
            kept.append(task)

        result = self._unique(kept)
        categories = sorted(set(all_categories))

        logger.info(
            f"[HierarchyReconstructor] 작업 {len(result)}개, 카테고리 {len(categories)}개"
        )
        return result, categories

    def _unique(self, tasks: list[ParsedTask]) -> list[ParsedTask]:
        """UID 기준으로 처음 나온 작업만 남깁니다."""
        seen: set[int] = set()
        unique = []
        for task in tasks:
            if task.uid in seen:
                logger.debug(f"[HierarchyReconstructor] 중복 UID 제거: {task.uid}")
                continue
            seen.add(task.uid)
            unique.append(task)
        return unique
