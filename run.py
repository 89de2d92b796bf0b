#!/usr/bin/env python
"""
启动脚本 - 申请排序决策平台Web界面
"""

import logging
import os
import sys

from app import app
from database.engine import check_database_connection, close_database, init_database

logger = logging.getLogger(__name__)

if __name__ == '__main__':
    if not check_database_connection():
        logger.error("无法连接数据库，请检查 DATABASE_URL")
        sys.exit(1)
    init_database()

    port = int(os.getenv('PORT', '8050'))
    debug = os.getenv('DEBUG', 'true').lower() == 'true'

    logger.info("=" * 60)
    logger.info("申请排序决策平台 - Web界面")
    logger.info(f"  - 访问地址: http://localhost:{port}")
    logger.info(f"  - 接口地址: http://localhost:{port}/api/requests")
    logger.info(f"  - 调试模式: {'已开启' if debug else '已关闭'}")
    logger.info(f"  - Python版本: {sys.version.split()[0]}")
    logger.info("=" * 60)

    try:
        app.run(
            debug=debug,
            host='0.0.0.0',
            port=port
        )
    finally:
        close_database()
