"""启动脚本"""

import uvicorn
from datacollab.core.config import settings
from datacollab.utils.logger import log


if __name__ == "__main__":
    log.info("="*60)
    log.info("DataCollab - 启动中")
    log.info("="*60)
    log.info(f"服务地址: http://{settings.api_host}:{settings.api_port}")
    log.info(f"API 文档: http://{settings.api_host}:{settings.api_port}/docs")
    log.info(f"调试模式: {settings.debug}")
    log.info(f"存储文件: {settings.store_path}")
    log.info(f"演示数据: {settings.seed_demo_data}")
    log.info("="*60)

    uvicorn.run(
        "datacollab.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info"
    )
