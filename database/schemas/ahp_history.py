"""
AHP历史 Pydantic Schema
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, List, Optional

from utils.ahp_config import Criterion


class AHPComparison(BaseModel):
    """成对判断 Schema"""
    item1: str = Field(..., min_length=1, description="比较项1")
    item2: str = Field(..., min_length=1, description="比较项2")
    value: float = Field(..., gt=0, allow_inf_nan=False, description="item1 相对 item2 的重要度（Saaty 标度）")

    @field_validator('item1', 'item2', mode='before')
    @classmethod
    def strip_label(cls, v):
        """去除首尾空白，与备选方案名称保持一致"""
        if isinstance(v, str):
            return v.strip()
        return v


class AHPHistoryCreate(BaseModel):
    """创建AHP计算历史 Schema"""
    criteria: List[Criterion] = Field(..., min_length=1, description="准则列表")
    criteria_comparison: List[AHPComparison] = Field(..., description="准则成对判断")
    alternatives: List[str] = Field(..., description="备选方案列表")
    alternative_comparison: Dict[Criterion, List[AHPComparison]] = Field(..., description="各准则下备选方案的成对判断")
    reference_request: int = Field(..., ge=1, description="关联的申请ID")

    @field_validator('criteria', mode='before')
    @classmethod
    def parse_criteria(cls, v):
        """准则标签按名称解析（忽略大小写）"""
        if not isinstance(v, list):
            return v
        return [Criterion.parse(label) for label in v]

    @field_validator('alternative_comparison', mode='before')
    @classmethod
    def parse_alternative_comparison(cls, v):
        """键按准则名称解析"""
        if not isinstance(v, dict):
            return v
        return {Criterion.parse(label): comps for label, comps in v.items()}

    @field_validator('alternatives')
    @classmethod
    def validate_alternatives(cls, v):
        """备选方案名称不能为空且不能重复"""
        names = [name.strip() for name in v]
        if any(not name for name in names):
            raise ValueError("备选方案名称不能为空")
        if len(set(names)) != len(names):
            raise ValueError(f"备选方案名称不能重复: {names}")
        return names

    @model_validator(mode='after')
    def validate_unique_criteria(self):
        """准则不能重复"""
        if len(set(self.criteria)) != len(self.criteria):
            labels = [c.value for c in self.criteria]
            raise ValueError(f"准则不能重复: {labels}")
        return self

    @model_validator(mode='after')
    def normalize_criteria_comparison(self):
        """准则判断中的标签统一为准则的规范名称；无法解析的标签原样保留"""
        normalized = []
        for comp in self.criteria_comparison:
            normalized.append(comp.model_copy(update={
                'item1': _canonical_label(comp.item1),
                'item2': _canonical_label(comp.item2),
            }))
        self.criteria_comparison = normalized
        return self


def _canonical_label(label: str) -> str:
    try:
        return Criterion.parse(label).value
    except ValueError:
        return label


class AHPHistoryFilter(BaseModel):
    """AHP历史查询条件 Schema"""
    reference_request: Optional[int] = Field(None, ge=1, description="关联的申请ID")
    limit: Optional[int] = Field(None, ge=1, le=500, description="每页数量")
    offset: int = Field(0, ge=0, description="偏移量")
