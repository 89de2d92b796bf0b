"""
AHP计算历史模型
"""
from sqlalchemy import Column, Text, Integer, Boolean, ForeignKey, Index, event, inspect
from sqlalchemy.orm import relationship
from database.models.base import BaseModel, CreatedAtMixin


class AHPHistory(BaseModel, CreatedAtMixin):
    """AHP计算历史表（创建后只允许修改软删除标记）"""
    __tablename__ = "ahp_histories"

    # 外键
    reference_request = Column(
        Integer,
        ForeignKey("requests.id"),
        nullable=False,
        comment="关联的申请ID"
    )

    # 计算结果（JSON 文本）
    criteria = Column(Text, nullable=False, comment="准则标签列表")
    criteria_comparison = Column(Text, comment="准则矩阵、权重与CR")
    alternatives = Column(Text, nullable=False, comment="备选方案列表")
    alternative_comparison = Column(Text, comment="各准则下的备选方案矩阵、权重与CR")
    priority_global = Column(Text, comment="全局排序")

    is_delete = Column(Boolean, nullable=False, default=False, comment="软删除标记")

    # 关系定义
    request = relationship("Request", back_populates="ahp_histories")

    # 索引
    __table_args__ = (
        Index('idx_ahp_history_request', 'reference_request'),
        Index('idx_ahp_history_visible', 'is_delete'),
        {'comment': 'AHP计算历史表'},
    )

    def __repr__(self):
        return f"<AHPHistory(id={self.id}, reference_request={self.reference_request}, is_delete={self.is_delete})>"


IMMUTABLE_COLUMNS = (
    'reference_request', 'criteria', 'criteria_comparison',
    'alternatives', 'alternative_comparison', 'priority_global', 'created_at',
)


@event.listens_for(AHPHistory, "before_update")
def guard_immutable_history(mapper, connection, target):
    """历史记录创建后只允许 visible -> deleted 的单向变更"""
    state = inspect(target)

    changed = [name for name in IMMUTABLE_COLUMNS if state.attrs[name].history.has_changes()]
    if changed:
        raise ValueError(f"AHP历史记录不可修改: {changed}")

    deleted_history = state.attrs['is_delete'].history
    if deleted_history.deleted and deleted_history.deleted[0] and not target.is_delete:
        raise ValueError("已删除的AHP历史记录不能恢复")
