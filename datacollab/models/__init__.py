"""数据模型包"""

from datacollab.models.dataset import (
    Record,
    FieldStats,
    ColumnSchema,
    DatasetSchema,
    Page
)
from datacollab.models.query import (
    FilterClause,
    SortSpec,
    AggregationItem,
    AggregationSpec,
    QueryRequest
)
from datacollab.models.plot import (
    ChartConfig,
    VisualizationSpec,
    ChartOutput
)
from datacollab.models.project import (
    PublicUser,
    User,
    Visualization,
    Project,
    Activity
)

__all__ = [
    # Dataset
    "Record",
    "FieldStats",
    "ColumnSchema",
    "DatasetSchema",
    "Page",
    # Query
    "FilterClause",
    "SortSpec",
    "AggregationItem",
    "AggregationSpec",
    "QueryRequest",
    # Plot
    "ChartConfig",
    "VisualizationSpec",
    "ChartOutput",
    # Project
    "PublicUser",
    "User",
    "Visualization",
    "Project",
    "Activity",
]
