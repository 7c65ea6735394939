"""系统配置管理"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """系统配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DATACOLLAB_",
        case_sensitive=False
    )

    # 系统限制
    max_upload_size_mb: int = 20
    default_page_size: int = 10
    max_page_size: int = 500

    # 服务器配置
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True

    # 存储路径
    duckdb_dir: Path = Path("./data/duckdb")

    # 首次启动时写入演示数据
    seed_demo_data: bool = True

    # 日志配置
    log_level: str = "INFO"
    log_file: Path = Path("./logs/app.log")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # 确保目录存在
        self.duckdb_dir.mkdir(parents=True, exist_ok=True)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    @property
    def store_path(self) -> Path:
        """记录存储的 DuckDB 文件"""
        return self.duckdb_dir / "datacollab.db"


# 全局配置实例
settings = Settings()
