"""Export tree builder - ordered work items to outline-numbered nodes."""

import logging
from collections import defaultdict

from schedule_loader.models import ExportNode, WorkItem

logger = logging.getLogger(__name__)


class ExportTreeBuilder:
    """정렬된 작업 항목 목록에서 개요 번호와 수준을 계산합니다."""

    def build(self, work_items: list[WorkItem]) -> list[ExportNode]:
        """
        깊이(depth)별로 묶어 얕은 수준부터 처리합니다. 같은 깊이에서는 입력 순서를 유지합니다.

        - 상위 항목이 이미 배치되어 있으면: 상위 개요 번호 + "." + 형제 순번(1부터)
        - 그렇지 않으면: 전체 입력에서의 위치(1부터)
        - 개요 수준 = 깊이 + 1

        Returns:
            ExportNode 목록 (처리 순서대로, 항목당 한 번)
        """
        positions: dict[int, int] = {}
        for index, item in enumerate(work_items):
            positions.setdefault(item.id, index + 1)

        grouped: dict[int, list[WorkItem]] = defaultdict(list)
        for item in work_items:
            grouped[item.depth].append(item)

        nodes: list[ExportNode] = []
        placed: dict[int, ExportNode] = {}
        child_counts: dict[int, int] = defaultdict(int)

        for depth in sorted(grouped):
            for item in grouped[depth]:
                if item.id in placed:
                    continue

                parent = placed.get(item.parent_id) if item.is_child else None
                if parent is not None:
                    child_counts[parent.key] += 1
                    outline_number = f"{parent.outline_number}.{child_counts[parent.key]}"
                else:
                    outline_number = str(positions[item.id])

                node = ExportNode(
                    work_item=item,
                    outline_number=outline_number,
                    outline_level=item.depth + 1,
                    position=len(nodes) + 1,
                )
                placed[item.id] = node
                nodes.append(node)

        logger.debug(f"[ExportTreeBuilder] 노드 {len(nodes)}개 생성 (깊이 {len(grouped)}단계)")
        return nodes
