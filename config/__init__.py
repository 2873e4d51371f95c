from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

def load_environment():
    """
    从 .env 文件加载环境变量 (例如 LOG_LEVEL)。
    已存在的环境变量不会被覆盖。
    """
    loaded = load_dotenv()
    logger.debug(f"环境变量加载完成 (.env 存在: {loaded})")
