"""
AHP 计算引擎 - 成对比较矩阵构建与权重求解

包括:
- MatrixBuilder: 由成对判断或数值得分构建互反比较矩阵
- AHPSolver: 列归一化 + 行均值近似主特征向量，计算一致性比率 CR

数值异常（零列和、零权重、非有限比值）在本模块内部消化，不会抛出异常；
只有非方阵输入会抛出 ValueError。
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from utils.ahp_config import DEFAULT_CONFIG, ZERO_SCORE_EPSILON, AHPConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Comparison:
    """一条成对判断：item1 相对 item2 的重要度为 value"""
    item1: str
    item2: str
    value: float


@dataclass(frozen=True)
class AHPResult:
    """单个比较矩阵的求解结果"""
    matrix: List[List[float]]
    weights: List[float]
    cr: float
    lambda_max: float = 0.0
    ci: float = 0.0
    threshold: float = field(default=DEFAULT_CONFIG.consistency_threshold, compare=False)

    @property
    def size(self) -> int:
        return len(self.weights)

    @property
    def is_consistent(self) -> bool:
        """CR 是否低于阈值（仅用于展示）"""
        return self.cr < self.threshold

    def to_dict(self) -> Dict:
        return {
            'matrix': [list(row) for row in self.matrix],
            'weights': list(self.weights),
            'cr': self.cr,
        }


class MatrixBuilder:
    """成对比较矩阵构建器"""

    def __init__(self, config: AHPConfig = DEFAULT_CONFIG, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def clip(self, ratio: float) -> float:
        """
        将比值截断到 Saaty 标度 [1/9, 9]

        非有限值或非正值视为中性值 1。
        """
        if ratio is None or not math.isfinite(ratio) or ratio <= 0:
            return 1.0
        if ratio > self.config.saaty_max:
            return self.config.saaty_max
        if ratio < self.config.saaty_min:
            return self.config.saaty_min
        return float(ratio)

    def build_from_comparisons(
        self,
        items: Sequence[str],
        comparisons: Iterable
    ) -> np.ndarray:
        """
        由显式成对判断构建矩阵

        Args:
            items: 有序且互不相同的标签
            comparisons: Comparison 或具有 item1/item2/value 属性（或键）的对象

        Returns:
            n x n 矩阵，未给出的比较保持为 1

        标签不在 items 中的判断会被忽略，不抛出异常。
        """
        labels = list(items)
        index = {label: i for i, label in enumerate(labels)}
        matrix = np.ones((len(labels), len(labels)), dtype=float)

        for comp in comparisons:
            item1, item2, value = _unpack_comparison(comp)
            i = index.get(item1)
            j = index.get(item2)
            if i is None or j is None:
                self.logger.debug(f"忽略未匹配的比较: {item1} vs {item2}")
                continue
            if i == j:
                # 对角线恒为 1
                continue
            if not math.isfinite(value) or value <= 0:
                self.logger.debug(f"忽略无效的比较值: {item1} vs {item2} = {value}")
                continue
            matrix[i, j] = value
            matrix[j, i] = 1.0 / value

        return matrix

    def build_from_scores(self, scores: Sequence[float]) -> np.ndarray:
        """
        由数值得分构建一致矩阵: m[i][j] = clip(scores[i] / scores[j])

        得分越大越优。scores[j] 为 0 时用极小分母代替（比值饱和到上限），
        两者都为 0 时取 1。
        """
        values = [float(s) for s in scores]
        n = len(values)
        matrix = np.ones((n, n), dtype=float)

        for i in range(n):
            for j in range(n):
                if values[j] == 0:
                    if values[i] == 0:
                        matrix[i, j] = 1.0
                    else:
                        matrix[i, j] = self.clip(values[i] / ZERO_SCORE_EPSILON)
                else:
                    matrix[i, j] = self.clip(values[i] / values[j])

        return matrix


class AHPSolver:
    """AHP 权重与一致性求解器"""

    def __init__(self, config: AHPConfig = DEFAULT_CONFIG):
        self.config = config

    def solve(self, matrix) -> AHPResult:
        """
        求解优先级权重向量与一致性比率

        步骤:
            1. 列求和，列归一化（列和为 0 时该列归一化结果为 0）
            2. 权重 = 归一化矩阵的行均值
            3. lambda_max = Σ (A·w)_i / w_i / n（跳过 w_i = 0 的项）
            4. CI = (lambda_max - n) / (n - 1)，CR = CI / RI[n]

        Args:
            matrix: n x n 比较矩阵（list 或 ndarray）

        Returns:
            AHPResult

        Raises:
            ValueError: 矩阵不是 n x n 方阵（调用方错误）。
                数值异常（零列和、零权重、非有限值）不会抛出异常。
        """
        m = np.array(matrix, dtype=float)
        if m.size == 0:
            return AHPResult(matrix=[], weights=[], cr=0.0, threshold=self.config.consistency_threshold)

        m = np.atleast_2d(m)
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise ValueError(f"比较矩阵必须是 n x n 方阵，当前形状: {m.shape}")
        n = m.shape[0]

        # 非有限值按中性值 1 处理
        m = np.where(np.isfinite(m), m, 1.0)

        col_sum = m.sum(axis=0)
        safe_sum = np.where(col_sum == 0, 1.0, col_sum)
        normalized = np.where(col_sum == 0, 0.0, m / safe_sum)

        weights = normalized.mean(axis=1)

        weighted = m @ weights
        nonzero = weights != 0
        lambda_max = float(np.sum(weighted[nonzero] / weights[nonzero]) / n)

        ci = (lambda_max - n) / (n - 1) if n > 1 else 0.0

        ri = self.config.random_index.get(n, 0.0)
        cr = ci / ri if ri else 0.0

        return AHPResult(
            matrix=m.tolist(),
            weights=weights.tolist(),
            cr=float(cr),
            lambda_max=lambda_max,
            ci=float(ci),
            threshold=self.config.consistency_threshold
        )

    def solve_scores(self, scores: Sequence[float], builder: MatrixBuilder = None) -> AHPResult:
        """由得分向量直接构建一致矩阵并求解"""
        builder = builder or MatrixBuilder(self.config)
        return self.solve(builder.build_from_scores(scores))


def _unpack_comparison(comp) -> Tuple[str, str, float]:
    """兼容 Comparison、pydantic 模型、dict 与三元组"""
    if isinstance(comp, dict):
        return comp.get('item1'), comp.get('item2'), float(comp.get('value'))
    if isinstance(comp, (tuple, list)):
        item1, item2, value = comp
        return item1, item2, float(value)
    return comp.item1, comp.item2, float(comp.value)


def format_matrix(matrix) -> str:
    """矩阵格式化为多行文本（用于日志）"""
    rows = np.array(matrix, dtype=float)
    if rows.size == 0:
        return ""
    return "\n".join(" ".join(f"{val:8.4f}" for val in row) for row in np.atleast_2d(rows))
