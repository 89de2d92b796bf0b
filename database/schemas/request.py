"""
申请查询 Pydantic Schema
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class RequestFind(BaseModel):
    """申请列表查询 Schema"""
    use_ahp: bool = Field(False, description="是否按AHP得分排序（yes/no）")
    event_complexity: Optional[str] = Field(None, description="复杂度评分JSON数组")

    @field_validator('use_ahp', mode='before')
    @classmethod
    def parse_use_ahp(cls, v):
        """兼容 'yes'/'no' 查询参数"""
        if isinstance(v, str):
            return v.strip().lower() in ('yes', 'true', '1')
        return bool(v) if v is not None else False


class ComplexityItem(BaseModel):
    """单条复杂度评分 Schema"""
    id: int = Field(..., ge=1, description="申请ID")
    event_name: Optional[str] = Field(None, description="活动名称")
    complexity: float = Field(..., ge=1, le=5, description="复杂度评分（1-5）")
