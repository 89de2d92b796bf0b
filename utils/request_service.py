"""
申请列表服务

可选按AHP得分排序：每条申请附加 ahp_score = {raw, percent}，
并按得分稳定降序重新排列。结果只存在于内存中，不持久化。
"""

import logging
from typing import Any, Dict, List, Union

from database.engine import get_db_session
from database.repositories import RequestRepository
from database.schemas import RequestFind
from utils.ahp_history_service import format_timestamp
from utils.ahp_pipeline import AHPPipeline
from utils.score_deriver import Alternative, parse_complexities

logger = logging.getLogger(__name__)


def serialize_request(request) -> Dict[str, Any]:
    """申请 ORM 对象转换为列表项"""
    event_type = request.event_type
    return {
        'id': request.id,
        'user': request.requester,
        'event_name': request.event_name,
        'event_location': request.event_location,
        'event_date_start': format_timestamp(request.event_date_start),
        'event_date_end': format_timestamp(request.event_date_end),
        'count_participant': request.count_participant,
        'event_type': {
            'id': event_type.id,
            'name': event_type.name,
            'priority': event_type.priority,
        } if event_type is not None else None,
        'created_at': format_timestamp(request.created_at),
    }


def merge_ranking(items: List[Dict[str, Any]], ranking) -> List[Dict[str, Any]]:
    """
    将排序结果合并到列表项并按得分重新排序

    Args:
        items: 列表项（含 id）
        ranking: RankedResult

    Returns:
        新列表，每项带 ahp_score = {raw, percent}
    """
    entries = {entry.alternative_id: entry for entry in ranking}
    merged = []
    for item in items:
        entry = entries.get(item['id'])
        if entry is None:
            merged.append(dict(item))
            continue
        merged.append({**item, 'ahp_score': {'raw': entry.score, 'percent': entry.percent}})

    merged.sort(key=lambda item: item.get('ahp_score', {}).get('raw', 0.0), reverse=True)
    return merged


class RequestService:
    """申请服务"""

    def __init__(self, session_scope=None, pipeline: AHPPipeline = None, request_repository: RequestRepository = None):
        self.session_scope = session_scope or get_db_session
        self.pipeline = pipeline or AHPPipeline()
        self.requests = request_repository or RequestRepository()

    def find(self, payload: Union[RequestFind, Dict[str, Any], None] = None) -> Dict[str, Any]:
        """
        列出申请

        Args:
            payload: RequestFind（use_ahp, event_complexity）

        Returns:
            {"count", "data"}
        """
        if payload is None:
            payload = RequestFind()
        elif not isinstance(payload, RequestFind):
            payload = RequestFind.model_validate(payload)

        with self.session_scope() as session:
            rows = self.requests.find_all(session)
            count = self.requests.count(session)
            data = [serialize_request(row) for row in rows]
            alternatives = [Alternative.from_request(row) for row in rows]

        if payload.use_ahp and alternatives:
            complexities = parse_complexities(payload.event_complexity)
            result = self.pipeline.rank_alternatives(alternatives, complexities)
            data = merge_ranking(data, result.ranking)
            logger.debug(f"AHP 排序完成: {len(alternatives)} 条申请")

        return {
            'count': count,
            'data': data,
        }
