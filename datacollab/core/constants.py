"""系统常量定义"""

from typing import Dict, Set

# 支持的文件类型
SUPPORTED_FILE_EXTENSIONS: Set[str] = {".csv", ".json"}

# 过滤操作符白名单
FILTER_OPERATORS: Set[str] = {
    "equals", "notEquals", "contains",
    "greaterThan", "lessThan", "greaterThanOrEqual", "lessThanOrEqual"
}

# 聚合函数白名单
AGGREGATION_FUNCTIONS: Set[str] = {
    "sum", "avg", "min", "max", "count"
}

# 图表类型
CHART_TYPES: Set[str] = {
    "line", "bar", "pie"
}

# 活动类型
ACTIVITY_TYPES: Set[str] = {
    "project_created",
    "project_updated",
    "project_deleted",
    "data_added",
    "visualization_added",
    "collaborator_added",
}

# 日期字符串格式（ISO 之外的常见写法）
DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
]

# CSV 布尔值写法
BOOLEAN_LITERALS: Dict[str, bool] = {
    "true": True,
    "false": False,
}

# 排序时不同类型的分组顺序
KIND_ORDER: Dict[str, int] = {
    "number": 0,
    "boolean": 1,
    "string": 2,
}

# 最大限制
MAX_COLUMNS = 500
MAX_CHART_SERIES = 20
