"""
准则得分推导 - 从申请属性计算 4 个准则的原始得分

- Urgency: 活动开始时间与申请创建时间的间隔越短越紧急
- Importance: 活动类型优先级（数值越小越重要）
- Participants: 参与人数
- Complexity: 外部给定的复杂度评分（1-5，缺省为 1），越简单得分越高
"""

import json
import math
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from utils.ahp_config import (
    Criterion,
    URGENCY_HOURS_WINDOW_DAYS,
    URGENCY_DAYS_WINDOW_DAYS,
    URGENCY_MIN_SCORE,
    URGENCY_MAX_SCORE,
    COMPLEXITY_DEFAULT_RATING,
    COMPLEXITY_CEILING,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alternative:
    """待排序的备选方案（一条活动申请）"""
    id: int
    name: str
    created_at: datetime
    event_start: datetime
    priority: int = 1
    participants: int = 0
    complexity: Optional[float] = None

    @classmethod
    def from_request(cls, request, complexity: Optional[float] = None) -> "Alternative":
        """从 Request ORM 对象构建"""
        event_type = getattr(request, 'event_type', None)
        priority = event_type.priority if event_type is not None else 1
        return cls(
            id=request.id,
            name=request.event_name,
            created_at=request.created_at,
            event_start=request.event_date_start,
            priority=priority,
            participants=request.count_participant or 0,
            complexity=complexity
        )


def compute_urgency_score(created_at: datetime, event_start: datetime) -> float:
    """
    紧急度得分

    间隔 < 3 天按小时计: 9 / (hours + 1)
    间隔 <= 30 天按天计: 9 / (days + 1)
    更长: 9 / ln(days + 2)
    负间隔视为 0，结果截断到 [0.1, 9]。
    """
    gap = event_start - created_at
    if gap < timedelta(0):
        gap = timedelta(0)

    hours = gap.total_seconds() / 3600.0
    days = hours / 24.0

    if days < URGENCY_HOURS_WINDOW_DAYS:
        score = 9.0 / (hours + 1.0)
    elif days <= URGENCY_DAYS_WINDOW_DAYS:
        score = 9.0 / (days + 1.0)
    else:
        score = 9.0 / math.log(days + 2.0)

    return min(max(score, URGENCY_MIN_SCORE), URGENCY_MAX_SCORE)


def compute_importance_score(priority: int) -> float:
    """重要度得分: 1 / priority（priority <= 0 按 1 处理）"""
    if priority is None or priority <= 0:
        priority = 1
    return 1.0 / float(priority)


def compute_complexity_score(rating: Optional[float]) -> float:
    """复杂度得分: 6 - rating，未提供时 rating 取 1"""
    if rating is None:
        rating = COMPLEXITY_DEFAULT_RATING
    return COMPLEXITY_CEILING - float(rating)


def parse_complexities(raw: Optional[str]) -> Dict[int, float]:
    """
    解析外部复杂度评分

    Args:
        raw: JSON 数组，元素形如 {"id": 1, "event_name": "...", "complexity": 3}

    Returns:
        {申请ID: 复杂度评分}；空串或格式错误时返回空字典
    """
    if not raw:
        return {}

    try:
        items = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"复杂度评分解析失败，忽略: {e}")
        return {}

    if not isinstance(items, list):
        logger.warning("复杂度评分必须是 JSON 数组，忽略")
        return {}

    result = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            result[int(item['id'])] = float(item.get('complexity', COMPLEXITY_DEFAULT_RATING))
        except (KeyError, TypeError, ValueError):
            continue
    return result


class ScoreDeriver:
    """将一组备选方案转换为各准则的原始得分向量"""

    def derive(
        self,
        alternatives: Sequence[Alternative],
        complexities: Optional[Mapping[int, float]] = None
    ) -> Dict[Criterion, List[float]]:
        """
        计算每个准则下的得分向量

        Args:
            alternatives: 备选方案（顺序即输出顺序）
            complexities: 外部复杂度评分 {id: rating}，优先于 Alternative.complexity

        Returns:
            {Criterion: [得分, ...]}
        """
        complexities = complexities or {}
        scores: Dict[Criterion, List[float]] = {criterion: [] for criterion in Criterion}

        for alt in alternatives:
            rating = complexities.get(alt.id, alt.complexity)
            scores[Criterion.URGENCY].append(compute_urgency_score(alt.created_at, alt.event_start))
            scores[Criterion.IMPORTANCE].append(compute_importance_score(alt.priority))
            scores[Criterion.PARTICIPANTS].append(float(alt.participants))
            scores[Criterion.COMPLEXITY].append(compute_complexity_score(rating))

        return scores
