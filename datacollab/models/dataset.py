"""数据集相关模型"""

from typing import List, Optional, Any, Dict, Union
from pydantic import BaseModel, Field

# 一行数据：字段名 -> 标量值（数值、字符串、布尔或 None）
Record = Dict[str, Any]


class FieldStats(BaseModel):
    """字段描述统计"""
    type: str = Field(..., description="字段类型: number, date, boolean, string, unknown")
    count: int = Field(..., ge=0, description="非空值数量")
    missing: int = Field(..., ge=0, description="缺失值数量")
    min: Optional[Union[int, float]] = Field(None, description="最小值（数值类型）")
    max: Optional[Union[int, float]] = Field(None, description="最大值（数值类型）")
    sum: Optional[Union[int, float]] = Field(None, description="总和（数值类型）")
    mean: Optional[float] = Field(None, description="均值（数值类型）")
    std_dev: Optional[float] = Field(None, description="总体标准差（数值类型）")
    unique_count: Optional[int] = Field(None, description="唯一值数量（字符串类型）")
    most_frequent: Optional[Any] = Field(None, description="出现次数最多的值（字符串类型）")
    most_frequent_count: Optional[int] = Field(None, description="最多出现次数（字符串类型）")


class ColumnSchema(BaseModel):
    """列 Schema"""
    name: str = Field(..., description="列名")
    type: str = Field(..., description="推断类型")
    example_values: List[Any] = Field(default_factory=list, description="示例值")


class DatasetSchema(BaseModel):
    """数据集 Schema"""
    project_id: str = Field(..., description="项目ID")
    row_count: int = Field(..., ge=0, description="总行数")
    columns: List[ColumnSchema] = Field(default_factory=list, description="列 Schema")


class Page(BaseModel):
    """分页结果"""
    rows: List[Record] = Field(..., description="当前页数据")
    page: int = Field(..., ge=1, description="当前页码（从1开始）")
    page_size: int = Field(..., ge=1, description="每页行数")
    total_rows: int = Field(..., ge=0, description="过滤后总行数")
    total_pages: int = Field(..., ge=0, description="总页数")
