"""Chart Engine - 图表生成引擎"""

from typing import Dict, Any, List

from datacollab.core.constants import MAX_CHART_SERIES
from datacollab.engines.type_inferencer import infer_types
from datacollab.models.dataset import Record
from datacollab.models.plot import ChartConfig, ChartOutput, VisualizationSpec
from datacollab.utils.logger import log


class ChartEngine:
    """图表生成引擎"""

    def generate(self, records: List[Record], spec: VisualizationSpec) -> ChartOutput:
        """
        生成图表

        Args:
            records: 图表数据（通常是过滤或聚合后的结果）
            spec: 可视化规范，未指定的坐标轴按推荐值补齐

        Returns:
            ChartOutput: 图表输出
        """
        log.info(f"生成图表: type={spec.type}, title={spec.title}")

        if not records:
            raise ValueError("图表数据为空，无法生成图表")

        config = self._resolve_config(records, spec.config)

        if spec.type == "line":
            option = self._generate_axis_chart(records, config, spec.title, "line")
        elif spec.type == "bar":
            option = self._generate_axis_chart(records, config, spec.title, "bar")
        elif spec.type == "pie":
            option = self._generate_pie_chart(records, config, spec.title)
        else:
            raise ValueError(f"不支持的图表类型: {spec.type}")

        return ChartOutput(type=spec.type, title=spec.title, option=option)

    def recommend(self, records: List[Record]) -> ChartConfig:
        """
        推荐坐标轴：X 取第一个非数值字段，Y 取第一个数值字段
        """
        if not records:
            raise ValueError("图表数据为空，无法推荐图表")

        types = infer_types(records)
        numeric_cols = [c for c, t in types.items() if t == "number"]
        other_cols = [c for c, t in types.items() if t != "number"]

        if not numeric_cols:
            raise ValueError("无法识别数值列用于 Y 轴")

        return ChartConfig(
            x_axis=other_cols[0] if other_cols else None,
            y_axis=[numeric_cols[0]]
        )

    def _resolve_config(self, records: List[Record], config: ChartConfig) -> ChartConfig:
        if config.x_axis and config.y_axis:
            resolved = config
        else:
            recommended = self.recommend(records)
            resolved = ChartConfig(
                x_axis=config.x_axis or recommended.x_axis,
                y_axis=config.y_axis or recommended.y_axis
            )

        if not resolved.x_axis or not resolved.y_axis:
            raise ValueError("图表必须提供 X 轴和 Y 轴字段")
        if len(resolved.y_axis) > MAX_CHART_SERIES:
            raise ValueError(f"Y 轴字段过多: {len(resolved.y_axis)} > {MAX_CHART_SERIES}")

        columns = set(records[0].keys())
        unknown = [c for c in [resolved.x_axis, *resolved.y_axis] if c not in columns]
        if unknown:
            raise ValueError(f"图表字段不存在: {unknown}")
        return resolved

    def _generate_axis_chart(
        self,
        records: List[Record],
        config: ChartConfig,
        title: str,
        chart_type: str
    ) -> Dict[str, Any]:
        """生成折线图 / 柱状图（每个 Y 字段一条 series）"""
        x_data = [row.get(config.x_axis) for row in records]

        series = []
        for field in config.y_axis:
            item: Dict[str, Any] = {
                "name": field,
                "type": chart_type,
                "data": [row.get(field) for row in records]
            }
            if chart_type == "line":
                item["smooth"] = True
            series.append(item)

        return {
            "title": {"text": title},
            "tooltip": {"trigger": "axis"},
            "legend": {"data": list(config.y_axis)},
            "xAxis": {
                "type": "category",
                "data": x_data,
                "name": config.x_axis
            },
            "yAxis": {"type": "value"},
            "series": series
        }

    def _generate_pie_chart(self, records: List[Record], config: ChartConfig, title: str) -> Dict[str, Any]:
        """生成饼图（只使用第一个 Y 字段）"""
        value_key = config.y_axis[0]
        pie_data = [
            {"name": str(row.get(config.x_axis)), "value": row.get(value_key)}
            for row in records
        ]

        return {
            "title": {"text": title, "left": "center"},
            "tooltip": {"trigger": "item"},
            "legend": {"orient": "vertical", "left": "left"},
            "series": [
                {
                    "name": value_key,
                    "type": "pie",
                    "radius": "50%",
                    "data": pie_data,
                    "emphasis": {
                        "itemStyle": {
                            "shadowBlur": 10,
                            "shadowOffsetX": 0,
                            "shadowColor": "rgba(0, 0, 0, 0.5)"
                        }
                    }
                }
            ]
        }


# 全局单例
_chart_engine = None


def get_chart_engine() -> ChartEngine:
    """获取 ChartEngine 单例"""
    global _chart_engine
    if _chart_engine is None:
        _chart_engine = ChartEngine()
    return _chart_engine
