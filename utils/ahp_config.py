"""
AHP 配置 - 层次分析法的策略常量

准则集合、准则原始重要度、Saaty 标度截断范围以及随机一致性指标表
都集中在这里，修改策略时无需改动算法代码。
"""
import enum
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


class Criterion(enum.Enum):
    """排序准则枚举（顺序即准则矩阵的行列顺序）"""
    URGENCY = "Urgency"
    IMPORTANCE = "Importance"
    PARTICIPANTS = "Participants"
    COMPLEXITY = "Complexity"

    @classmethod
    def parse(cls, label: str) -> "Criterion":
        """按标签解析准则（忽略大小写与首尾空白）"""
        if isinstance(label, cls):
            return label
        normalized = str(label).strip().lower()
        for criterion in cls:
            if criterion.value.lower() == normalized:
                return criterion
        allowed = [c.value for c in cls]
        raise ValueError(f"未知准则 '{label}'，必须是 {allowed} 之一")


# ============================================================
# Saaty 标度
# ============================================================
SAATY_MIN = 1.0 / 9.0
SAATY_MAX = 9.0

# 分母为 0 时使用的极小值（比值会饱和到 SAATY_MAX）
ZERO_SCORE_EPSILON = 1e-9

# ============================================================
# 随机一致性指标 RI（n > 10 时不计算 CR）
# ============================================================
RANDOM_INDEX: Dict[int, float] = {
    1: 0.00, 2: 0.00, 3: 0.58, 4: 0.90, 5: 1.12,
    6: 1.24, 7: 1.32, 8: 1.41, 9: 1.45, 10: 1.49
}

# CR < 0.1 视为一致（仅用于展示，不拒绝任何矩阵）
CONSISTENCY_THRESHOLD = 0.1

# ============================================================
# 准则原始重要度：Urgency, Importance, Participants, Complexity
# ============================================================
CRITERIA_IMPORTANCE: Dict[Criterion, float] = {
    Criterion.URGENCY: 5.0,
    Criterion.IMPORTANCE: 3.0,
    Criterion.PARTICIPANTS: 2.0,
    Criterion.COMPLEXITY: 1.0,
}

# ============================================================
# 紧急度计算阈值与复杂度默认值
# ============================================================
URGENCY_HOURS_WINDOW_DAYS = 3
URGENCY_DAYS_WINDOW_DAYS = 30
URGENCY_MIN_SCORE = 0.1
URGENCY_MAX_SCORE = 9.0

COMPLEXITY_DEFAULT_RATING = 1.0
COMPLEXITY_CEILING = 6.0


def load_criteria_importance(env_value: str = None) -> Dict[Criterion, float]:
    """
    读取准则重要度，支持环境变量 AHP_CRITERIA_IMPORTANCE 覆盖

    Args:
        env_value: 逗号分隔的 4 个正数（按 Criterion 顺序），None 时读取环境变量

    Returns:
        {Criterion: 重要度}
    """
    raw = env_value if env_value is not None else os.getenv('AHP_CRITERIA_IMPORTANCE', '')
    if not raw.strip():
        return dict(CRITERIA_IMPORTANCE)

    try:
        values = [float(part.strip()) for part in raw.split(',') if part.strip()]
    except ValueError:
        raise ValueError(f"AHP_CRITERIA_IMPORTANCE 格式错误: {raw!r}")

    criteria = list(Criterion)
    if len(values) != len(criteria):
        raise ValueError(f"AHP_CRITERIA_IMPORTANCE 需要 {len(criteria)} 个数值，当前: {len(values)}")
    if any(v <= 0 for v in values):
        raise ValueError("AHP_CRITERIA_IMPORTANCE 的数值必须为正数")

    return dict(zip(criteria, values))


def default_criteria_importance() -> Dict[Criterion, float]:
    """AHPConfig 的默认重要度；环境变量无效时记录错误并回退到内置值"""
    try:
        return load_criteria_importance()
    except ValueError as e:
        logger.error(f"{e}，使用默认准则重要度")
        return dict(CRITERIA_IMPORTANCE)


@dataclass(frozen=True)
class AHPConfig:
    """AHP 计算使用的策略参数"""
    criteria_importance: Dict[Criterion, float] = field(default_factory=default_criteria_importance)
    saaty_min: float = SAATY_MIN
    saaty_max: float = SAATY_MAX
    random_index: Dict[int, float] = field(default_factory=lambda: dict(RANDOM_INDEX))
    consistency_threshold: float = CONSISTENCY_THRESHOLD

    @property
    def criteria(self) -> Tuple[Criterion, ...]:
        """按固定顺序返回准则"""
        return tuple(c for c in Criterion if c in self.criteria_importance)

    def importance_vector(self) -> Tuple[float, ...]:
        return tuple(self.criteria_importance[c] for c in self.criteria)


DEFAULT_CONFIG = AHPConfig()
