"""图表相关模型"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datacollab.core.constants import CHART_TYPES


class ChartConfig(BaseModel):
    """坐标轴映射"""
    model_config = ConfigDict(populate_by_name=True)

    x_axis: Optional[str] = Field(None, alias="xAxis", description="X轴列名")
    y_axis: List[str] = Field(default_factory=list, alias="yAxis", description="Y轴列名（可多列）")


class VisualizationSpec(BaseModel):
    """可视化规范"""
    name: Optional[str] = Field(None, description="图表标题")
    type: str = Field("bar", description="图表类型: line, bar, pie")
    config: ChartConfig = Field(default_factory=ChartConfig, description="坐标轴映射")

    @field_validator('type')
    @classmethod
    def validate_chart_type(cls, v: str) -> str:
        if v not in CHART_TYPES:
            raise ValueError(f"不支持的图表类型: {v}")
        return v

    @property
    def title(self) -> str:
        return self.name or f"Visualisation {self.type}"


class ChartOutput(BaseModel):
    """图表输出"""
    type: str = Field(..., description="图表类型")
    title: str = Field(..., description="图表标题")
    option: Dict[str, Any] = Field(..., description="ECharts option JSON")
