"""DataCollab - 协作式数据分析服务"""

__version__ = "0.1.0"
