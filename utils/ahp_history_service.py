"""
AHP历史业务服务

- create: 校验请求 → 查找关联申请 → 计算 → 保存（每次调用新建一条记录）
- find / find_by_id: 读取并组装展示视图
- delete: 软删除（单向，不可恢复）

事务由会话上下文负责：任一步失败都会回滚，不会写入半成品记录。
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Union

from database.engine import get_db_session
from database.repositories import AHPHistoryRepository, RequestRepository
from database.schemas import AHPHistoryCreate, AHPHistoryFilter
from utils.ahp_pipeline import AHPPipeline
from utils.errors import HistoryNotFoundError, RequestNotFoundError
from utils.history_record import HistoryRecord

logger = logging.getLogger(__name__)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """时间格式化为 2006-01-02T15:04:05Z 形式（不做时区转换）"""
    if value is None:
        return None
    return value.strftime('%Y-%m-%dT%H:%M:%SZ')


class AHPHistoryService:
    """AHP历史服务"""

    def __init__(
        self,
        session_scope=None,
        pipeline: AHPPipeline = None,
        history_repository: AHPHistoryRepository = None,
        request_repository: RequestRepository = None
    ):
        self.session_scope = session_scope or get_db_session
        self.pipeline = pipeline or AHPPipeline()
        self.histories = history_repository or AHPHistoryRepository()
        self.requests = request_repository or RequestRepository()

    def create(self, payload: Union[AHPHistoryCreate, Dict[str, Any]]) -> Dict[str, Any]:
        """
        计算并保存一条AHP历史

        Args:
            payload: AHPHistoryCreate 或等价字典

        Returns:
            {"message", "id"}

        Raises:
            pydantic.ValidationError: 请求格式错误（在任何计算之前）
            RequestNotFoundError: 关联申请不存在
            SQLAlchemyError: 持久化失败（事务已回滚）
        """
        if not isinstance(payload, AHPHistoryCreate):
            payload = AHPHistoryCreate.model_validate(payload)

        with self.session_scope() as session:
            if self.requests.find_by_id(session, payload.reference_request) is None:
                raise RequestNotFoundError(payload.reference_request)

            record = self.pipeline.evaluate_comparisons(payload)
            stored = self.histories.store(session, record)

        logger.info(f"AHP历史已保存: id={stored.id}, reference_request={stored.reference_request}")
        return {
            'message': "success create!",
            'id': stored.id,
        }

    def find(self, filters: Union[AHPHistoryFilter, Dict[str, Any], None] = None) -> Dict[str, Any]:
        """
        列出可见的AHP历史

        Returns:
            {"count": 总数, "data": [列表项]}
        """
        if filters is None:
            filters = AHPHistoryFilter()
        elif not isinstance(filters, AHPHistoryFilter):
            filters = AHPHistoryFilter.model_validate(filters)

        with self.session_scope() as session:
            records = self.histories.list(
                session,
                reference_request=filters.reference_request,
                limit=filters.limit,
                offset=filters.offset
            )
            count = self.histories.count(session, reference_request=filters.reference_request)

            data = []
            for record in records:
                request = self._reference_request(session, record)
                data.append({
                    'id': record.id,
                    'criteria': record.criteria_labels,
                    'alternatives': list(record.alternatives or ()),
                    'priority': record.global_priority(),
                    'reference_request': {
                        'id': request.id,
                        'user': request.requester,
                        'event_name': request.event_name,
                    },
                    'created_at': format_timestamp(record.created_at),
                })

        return {
            'count': count,
            'data': data,
        }

    def find_by_id(self, history_id: int) -> Dict[str, Any]:
        """
        读取单条AHP历史的完整视图

        Returns:
            {"data": 详情}；记录不存在或已删除时 data 为 None
        """
        with self.session_scope() as session:
            record = self.histories.find_by_id(session, history_id)
            if record is None:
                return {'data': None}

            request = self._reference_request(session, record)
            detail = {
                'id': record.id,
                'criteria_summary': record.criteria_summary(),
                'alternatives': list(record.alternatives or ()),
                'alternative_summary': record.alternative_summary(),
                'global_priority': record.global_priority(),
                'reference_request': {
                    'id': request.id,
                    'user': request.requester,
                    'event_name': request.event_name,
                    'description': request.description,
                },
                'created_at': format_timestamp(record.created_at),
            }

        return {'data': detail}

    def delete(self, history_id: int) -> Dict[str, Any]:
        """
        软删除AHP历史

        Raises:
            HistoryNotFoundError: 记录不存在或已删除
        """
        with self.session_scope() as session:
            if not self.histories.soft_delete(session, history_id):
                raise HistoryNotFoundError(history_id)

        logger.info(f"AHP历史已删除: id={history_id}")
        return {'message': "success delete!"}

    def _reference_request(self, session, record: HistoryRecord):
        request = self.requests.find_by_id(session, record.reference_request, include_deleted=True)
        if request is None:
            raise RequestNotFoundError(record.reference_request)
        return request
