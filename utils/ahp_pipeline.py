"""
AHP 计算流水线

两种入口:
- rank_alternatives: 由申请属性自动推导得分（实时列表排序，不持久化）
- evaluate_comparisons: 由显式成对判断计算，生成 HistoryRecord

流水线本身是纯计算：不做 I/O、不持有共享状态，所有追踪输出都写入可注入的 logger。
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from utils.ahp_config import DEFAULT_CONFIG, AHPConfig, Criterion
from utils.ahp_engine import AHPResult, AHPSolver, MatrixBuilder, format_matrix
from utils.aggregator import Aggregator, RankedResult
from utils.history_record import HistoryRecord
from utils.score_deriver import Alternative, ScoreDeriver


@dataclass(frozen=True)
class ScoreRanking:
    """得分推导模式的计算结果"""
    ranking: RankedResult
    criteria_result: Optional[AHPResult] = None
    criterion_results: Dict[Criterion, AHPResult] = field(default_factory=dict)
    raw_scores: Dict[Criterion, list] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.ranking


class AHPPipeline:
    """ScoreDeriver → MatrixBuilder → AHPSolver → Aggregator"""

    def __init__(self, config: AHPConfig = DEFAULT_CONFIG, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.builder = MatrixBuilder(config, logger=self.logger)
        self.solver = AHPSolver(config)
        self.deriver = ScoreDeriver()
        self.aggregator = Aggregator()

    def _trace(self, title: str, result: AHPResult) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        self.logger.debug(
            f"[{title}]\n{format_matrix(result.matrix)}\n"
            f"weights={[round(w, 6) for w in result.weights]} CR={result.cr:.4f}"
        )

    def solve_criteria(self) -> AHPResult:
        """由固定准则重要度构建准则矩阵并求解"""
        result = self.solver.solve_scores(self.config.importance_vector(), builder=self.builder)
        self._trace("准则矩阵", result)
        return result

    def rank_alternatives(
        self,
        alternatives: Sequence[Alternative],
        complexities: Optional[Mapping[int, float]] = None
    ) -> ScoreRanking:
        """
        按 4 个固定准则对备选方案排序

        Args:
            alternatives: 备选方案
            complexities: 外部复杂度评分 {id: rating}

        Returns:
            ScoreRanking；没有备选方案时直接返回空排序，不计算任何矩阵
        """
        if not alternatives:
            return ScoreRanking(ranking=RankedResult())

        self.logger.debug(f"AHP 排序: {len(alternatives)} 个备选方案")

        raw_scores = self.deriver.derive(alternatives, complexities)
        criteria_result = self.solve_criteria()

        criterion_results = {}
        for criterion in self.config.criteria:
            result = self.solver.solve_scores(raw_scores[criterion], builder=self.builder)
            self._trace(f"{criterion.value} 矩阵", result)
            criterion_results[criterion] = result

        ranking = self.aggregator.aggregate(
            self.config.criteria,
            criteria_result.weights,
            {c: r.weights for c, r in criterion_results.items()},
            names=[alt.name for alt in alternatives],
            ids=[alt.id for alt in alternatives]
        )
        self._trace_ranking(ranking)

        return ScoreRanking(
            ranking=ranking,
            criteria_result=criteria_result,
            criterion_results=criterion_results,
            raw_scores=raw_scores
        )

    def evaluate_comparisons(self, payload) -> HistoryRecord:
        """
        由显式成对判断计算 AHP，生成未持久化的 HistoryRecord

        Args:
            payload: AHPHistoryCreate（已通过校验）

        Returns:
            HistoryRecord
        """
        criteria = tuple(payload.criteria)
        labels = [c.value for c in criteria]
        alternatives = tuple(payload.alternatives)

        if not alternatives:
            return HistoryRecord(
                criteria=criteria,
                criteria_result=None,
                alternatives=alternatives,
                alternative_results={},
                ranking=RankedResult(),
                reference_request=payload.reference_request
            )

        criteria_matrix = self.builder.build_from_comparisons(labels, payload.criteria_comparison)
        criteria_result = self.solver.solve(criteria_matrix)
        self._trace("准则矩阵", criteria_result)

        alternative_results = {}
        for criterion, comparisons in payload.alternative_comparison.items():
            matrix = self.builder.build_from_comparisons(alternatives, comparisons)
            result = self.solver.solve(matrix)
            self._trace(f"{criterion.value} 备选方案矩阵", result)
            alternative_results[criterion] = result

        ranking = self.aggregator.aggregate(
            criteria,
            criteria_result.weights,
            {c: r.weights for c, r in alternative_results.items()},
            names=list(alternatives)
        )
        self._trace_ranking(ranking)

        return HistoryRecord(
            criteria=criteria,
            criteria_result=criteria_result,
            alternatives=alternatives,
            alternative_results=alternative_results,
            ranking=ranking,
            reference_request=payload.reference_request
        )

    def _trace_ranking(self, ranking: RankedResult) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        for entry in ranking:
            self.logger.debug(f"{entry.rank}. {entry.name} (Score: {entry.score:.6f}, {entry.percent})")
