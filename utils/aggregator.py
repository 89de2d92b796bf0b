"""
权重合成与排序

将准则层权重与各准则下的备选方案权重合成为最终得分，稳定降序排序，
并按"占总分的百分比"格式化。
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd


@dataclass(frozen=True)
class RankedEntry:
    """排序结果中的一项"""
    rank: int
    alternative_id: Any
    name: str
    score: float
    percent: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rank': self.rank,
            'id': self.alternative_id,
            'name': self.name,
            'score': self.score,
            'percent': self.percent,
        }


class RankedResult:
    """按最终得分降序排列的结果（相同得分保持输入顺序）"""

    def __init__(self, entries: Sequence[RankedEntry] = ()):
        self._entries: Tuple[RankedEntry, ...] = tuple(entries)

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index) -> RankedEntry:
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other) -> bool:
        return isinstance(other, RankedResult) and self._entries == other._entries

    def __repr__(self):
        return f"<RankedResult(n={len(self._entries)})>"

    @property
    def entries(self) -> Tuple[RankedEntry, ...]:
        return self._entries

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def score_map(self) -> Dict[Any, float]:
        """{alternative_id: score}"""
        return {entry.alternative_id: entry.score for entry in self._entries}

    def to_records(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def to_dataframe(self) -> pd.DataFrame:
        """转换为表格（score 保留 6 位小数用于展示）"""
        df = pd.DataFrame(self.to_records(), columns=['rank', 'id', 'name', 'score', 'percent'])
        if not df.empty:
            df['score'] = df['score'].map(lambda s: f"{s:.6f}")
        return df


def format_percent(score: float, total: float) -> str:
    """占总分百分比，保留两位小数"""
    if total == 0:
        return "0.00%"
    return f"{score / total * 100:.2f}%"


class Aggregator:
    """层次合成器"""

    def combine(
        self,
        criteria: Sequence[Hashable],
        criteria_weights: Sequence[float],
        alternative_weights: Mapping[Hashable, Sequence[float]],
        n_alternatives: int
    ) -> List[float]:
        """
        计算最终得分: final[i] = Σ_c criteria_weight[c] * alternative_weights[c][i]

        alternative_weights 中不属于 criteria 的准则不参与合成。
        """
        index = {criterion: k for k, criterion in enumerate(criteria)}
        totals = [0.0] * n_alternatives

        for criterion, weights in alternative_weights.items():
            k = index.get(criterion)
            if k is None:
                continue
            for i in range(n_alternatives):
                totals[i] += criteria_weights[k] * weights[i]

        return totals

    def rank(
        self,
        scores: Sequence[float],
        names: Sequence[str],
        ids: Optional[Sequence[Any]] = None
    ) -> RankedResult:
        """
        按最终得分稳定降序排序

        Args:
            scores: 每个备选方案的最终得分
            names: 显示名称
            ids: 备选方案标识（缺省为 None）

        Returns:
            RankedResult；输入为空时返回空结果
        """
        if not scores:
            return RankedResult()

        ids = list(ids) if ids is not None else [None] * len(scores)
        total = sum(scores)

        # sorted 是稳定排序
        order = sorted(range(len(scores)), key=lambda i: scores[i], reverse=True)

        return RankedResult([
            RankedEntry(
                rank=position + 1,
                alternative_id=ids[i],
                name=names[i],
                score=scores[i],
                percent=format_percent(scores[i], total)
            )
            for position, i in enumerate(order)
        ])

    def aggregate(
        self,
        criteria: Sequence[Hashable],
        criteria_weights: Sequence[float],
        alternative_weights: Mapping[Hashable, Sequence[float]],
        names: Sequence[str],
        ids: Optional[Sequence[Any]] = None
    ) -> RankedResult:
        """合成最终得分并排序"""
        if not names:
            return RankedResult()
        scores = self.combine(criteria, criteria_weights, alternative_weights, len(names))
        return self.rank(scores, names, ids)
