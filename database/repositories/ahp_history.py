"""
AHP历史数据访问

store 每次调用都新建一行；find/list/count 只返回未软删除的记录。
"""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from database.models import AHPHistory
from utils.history_record import HistoryRecord


class AHPHistoryRepository:
    """AHP历史仓储"""

    def store(self, session: Session, record: HistoryRecord) -> HistoryRecord:
        """保存记录，返回带有ID与创建时间的新记录"""
        row = AHPHistory(**record.to_storage())
        session.add(row)
        session.flush()
        return record.with_identity(row.id, row.created_at)

    def _get_visible(self, session: Session, history_id: int) -> Optional[AHPHistory]:
        stmt = select(AHPHistory).where(
            AHPHistory.id == history_id,
            AHPHistory.is_delete.is_(False)
        )
        return session.execute(stmt).scalar_one_or_none()

    def find_by_id(self, session: Session, history_id: int) -> Optional[HistoryRecord]:
        row = self._get_visible(session, history_id)
        return HistoryRecord.from_storage(row) if row is not None else None

    def _filtered(self, stmt, reference_request: Optional[int]):
        stmt = stmt.where(AHPHistory.is_delete.is_(False))
        if reference_request is not None:
            stmt = stmt.where(AHPHistory.reference_request == reference_request)
        return stmt

    def list(
        self,
        session: Session,
        reference_request: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[HistoryRecord]:
        """按创建时间倒序列出记录"""
        stmt = self._filtered(select(AHPHistory), reference_request)
        stmt = stmt.order_by(AHPHistory.created_at.desc(), AHPHistory.id.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = session.execute(stmt).scalars().all()
        return [HistoryRecord.from_storage(row) for row in rows]

    def count(self, session: Session, reference_request: Optional[int] = None) -> int:
        stmt = self._filtered(select(func.count(AHPHistory.id)), reference_request)
        return session.execute(stmt).scalar_one()

    def soft_delete(self, session: Session, history_id: int) -> bool:
        """
        软删除记录

        Returns:
            记录存在且此前可见时返回 True
        """
        row = self._get_visible(session, history_id)
        if row is None:
            return False
        row.is_delete = True
        session.flush()
        return True
