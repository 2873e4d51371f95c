"""
日志配置
控制台 + 滚动文件两路输出；Streamlit 每次交互都会重跑脚本，重复调用不会叠加 handler。
"""
import logging
import logging.handlers
import os
import sys

LOG_DIR = "logs"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

# 请求日志过于频繁的第三方库
NOISY_LOGGERS = ("httpx", "httpcore", "markdown_it")

def setup_logging(log_dir: str = LOG_DIR) -> str:
    """
    初始化根记录器。级别取自环境变量 LOG_LEVEL (默认 INFO)。

    Returns:
        str: 日志文件路径。
    """
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")
    formatter = logging.Formatter(LOG_FORMAT)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
        handler.close()

    logging.root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024, # 10 MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    logging.root.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logging.root.addHandler(console_handler)

    logging.captureWarnings(True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
