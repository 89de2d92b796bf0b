"""
AHP 计算历史记录

HistoryRecord 保存一次计算产生的全部矩阵、权重、CR 与全局排序，
创建后不可修改（软删除标记除外，由持久化层维护）。

存储格式: 各字段序列化为 JSON 文本；重新读取时解析失败的字段置为 None。
"""

import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from utils.ahp_config import Criterion
from utils.ahp_engine import AHPResult
from utils.aggregator import RankedEntry, RankedResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    """一次 AHP 计算的不可变记录"""
    criteria: Optional[Tuple[Criterion, ...]]
    criteria_result: Optional[AHPResult]
    alternatives: Optional[Tuple[str, ...]]
    alternative_results: Optional[Mapping[Criterion, AHPResult]]
    ranking: Optional[RankedResult]
    reference_request: int
    is_delete: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.alternative_results is not None and not isinstance(self.alternative_results, MappingProxyType):
            object.__setattr__(self, 'alternative_results', MappingProxyType(dict(self.alternative_results)))

    @property
    def criteria_labels(self) -> List[str]:
        return [c.value for c in self.criteria] if self.criteria is not None else []

    def with_identity(self, record_id: int, created_at: datetime) -> "HistoryRecord":
        """返回带有存储ID与创建时间的副本"""
        return replace(self, id=record_id, created_at=created_at)

    # ==================== 序列化 ====================

    def to_storage(self) -> Dict[str, Any]:
        """转换为 AHPHistory 表的列值（JSON 文本）"""
        alternative_comparison = {
            criterion.value: result.to_dict()
            for criterion, result in (self.alternative_results or {}).items()
        }
        priority_global = {
            'alternatives': list(self.alternatives or ()),
            'priority': self.ranking.to_records() if self.ranking is not None else [],
        }
        return {
            'criteria': json.dumps(self.criteria_labels),
            'criteria_comparison': json.dumps(self.criteria_result.to_dict() if self.criteria_result else None),
            'alternatives': json.dumps(list(self.alternatives or ())),
            'alternative_comparison': json.dumps(alternative_comparison),
            'priority_global': json.dumps(priority_global),
            'reference_request': self.reference_request,
            'is_delete': self.is_delete,
        }

    @classmethod
    def from_storage(cls, row) -> "HistoryRecord":
        """
        从 AHPHistory 行还原记录

        任一 JSON 字段解析失败时该字段为 None，不抛出异常。
        """
        record_id = getattr(row, 'id', None)

        criteria = _parse_criteria(_load_json(row.criteria, 'criteria', record_id))
        criteria_result = _parse_result(_load_json(row.criteria_comparison, 'criteria_comparison', record_id))

        alternatives_raw = _load_json(row.alternatives, 'alternatives', record_id)
        alternatives = tuple(str(a) for a in alternatives_raw) if isinstance(alternatives_raw, list) else None

        alternative_results = None
        alt_raw = _load_json(row.alternative_comparison, 'alternative_comparison', record_id)
        if isinstance(alt_raw, dict):
            alternative_results = {}
            for label, payload in alt_raw.items():
                try:
                    criterion = Criterion.parse(label)
                except ValueError:
                    logger.warning(f"AHP历史 {record_id}: 忽略未知准则 {label!r}")
                    continue
                result = _parse_result(payload)
                if result is not None:
                    alternative_results[criterion] = result

        ranking = _parse_ranking(_load_json(row.priority_global, 'priority_global', record_id))

        return cls(
            criteria=criteria,
            criteria_result=criteria_result,
            alternatives=alternatives,
            alternative_results=alternative_results,
            ranking=ranking,
            reference_request=row.reference_request,
            is_delete=bool(row.is_delete),
            id=record_id,
            created_at=getattr(row, 'created_at', None)
        )

    # ==================== 展示视图 ====================

    def criteria_summary(self) -> Dict[str, Any]:
        """准则汇总: {count, labels, cr, weights, matrix}"""
        labels = self.criteria_labels
        result = self.criteria_result
        weights = []
        if result is not None:
            weights = [
                {'name': labels[i] if i < len(labels) else None, 'weight': f"{w:.4f}"}
                for i, w in enumerate(result.weights)
            ]
        return {
            'count': len(labels),
            'labels': labels,
            'cr': result.cr if result is not None else None,
            'weights': weights,
            'matrix': result.matrix if result is not None else None,
        }

    def alternative_summary(self) -> List[Dict[str, Any]]:
        """各准则下的备选方案汇总（按准则固定顺序）"""
        results = self.alternative_results or {}
        return [
            {
                'criterion': criterion.value,
                'cr': results[criterion].cr,
                'weights': list(results[criterion].weights),
                'matrix': results[criterion].matrix,
            }
            for criterion in Criterion
            if criterion in results
        ]

    def global_priority(self) -> List[Dict[str, Any]]:
        """全局排序: [{rank, name, score}]，score 保留 6 位小数"""
        if self.ranking is None:
            return []
        return [
            {'rank': entry.rank, 'name': entry.name, 'score': f"{entry.score:.6f}"}
            for entry in self.ranking
        ]


def _load_json(text: Optional[str], field_name: str, record_id) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        logger.warning(f"AHP历史 {record_id}: 字段 {field_name} 解析失败，按缺失处理 ({e})")
        return None


def _parse_criteria(raw) -> Optional[Tuple[Criterion, ...]]:
    if not isinstance(raw, list):
        return None
    try:
        return tuple(Criterion.parse(label) for label in raw)
    except ValueError as e:
        logger.warning(f"准则标签解析失败，按缺失处理 ({e})")
        return None


def _parse_result(raw) -> Optional[AHPResult]:
    if not isinstance(raw, dict):
        return None
    try:
        return AHPResult(
            matrix=[[float(v) for v in row] for row in raw.get('matrix') or []],
            weights=[float(w) for w in raw.get('weights') or []],
            cr=float(raw.get('cr') or 0.0)
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"矩阵结果解析失败，按缺失处理 ({e})")
        return None


def _parse_ranking(raw) -> Optional[RankedResult]:
    if not isinstance(raw, dict) or not isinstance(raw.get('priority'), list):
        return None
    entries = []
    for position, item in enumerate(raw['priority']):
        if not isinstance(item, dict):
            continue
        try:
            entries.append(RankedEntry(
                rank=int(item.get('rank', position + 1)),
                alternative_id=item.get('id'),
                name=str(item.get('name')),
                score=float(item.get('score', 0.0)),
                percent=str(item.get('percent', ''))
            ))
        except (TypeError, ValueError):
            continue
    return RankedResult(entries)
