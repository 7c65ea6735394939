"""查询相关模型"""

from typing import List, Optional, Any, Literal
from pydantic import BaseModel, ConfigDict, Field


class FilterClause(BaseModel):
    """过滤条件"""
    column: Optional[str] = Field(None, description="列名")
    operator: str = Field("equals", description="操作符: equals, notEquals, contains, greaterThan, ...（未知操作符被忽略）")
    value: Any = Field(None, description="过滤值")


class SortSpec(BaseModel):
    """排序规则（单列）"""
    column: Optional[str] = Field(None, description="排序列名")
    direction: Literal["asc", "desc"] = Field("asc", description="排序方向")


class AggregationItem(BaseModel):
    """聚合定义"""
    column: str = Field(..., description="聚合列名")
    function: str = Field(..., description="聚合函数: sum, avg, min, max, count（未知函数被忽略）")

    @property
    def output_name(self) -> str:
        """结果列名: {column}_{function}"""
        return f"{self.column}_{self.function}"


class AggregationSpec(BaseModel):
    """分组聚合规范"""
    model_config = ConfigDict(populate_by_name=True)

    group_by: Optional[str] = Field(None, alias="groupBy", description="分组列")
    aggregations: List[AggregationItem] = Field(default_factory=list, description="聚合操作")


class QueryRequest(BaseModel):
    """表格查询请求"""
    model_config = ConfigDict(populate_by_name=True)

    filters: List[FilterClause] = Field(default_factory=list, description="过滤条件（AND）")
    sort: Optional[SortSpec] = Field(None, description="排序规则")
    search: Optional[str] = Field(None, description="全文搜索关键词")
    page: int = Field(1, ge=1, description="页码")
    page_size: Optional[int] = Field(None, ge=1, alias="pageSize", description="每页行数")
