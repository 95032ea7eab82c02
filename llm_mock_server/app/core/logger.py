import logging
import os
from logging.handlers import RotatingFileHandler

from llm_mock_server.app.core.config import LOG_DIR, LOG_LEVEL

LOG_FORMATTER = logging.Formatter(
    "%(asctime)s [%(levelname)s] [%(name)s] [%(module)s:%(lineno)d] - %(message)s"
)

console_handler = logging.StreamHandler()
console_handler.setFormatter(LOG_FORMATTER)
console_handler.setLevel(LOG_LEVEL)

root_logger = logging.getLogger()
root_logger.setLevel(LOG_LEVEL)
if not root_logger.handlers:
    root_logger.addHandler(console_handler)

    # LOG_DIR 이 비어 있으면 콘솔에만 기록
    if LOG_DIR:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=os.path.join(LOG_DIR, "app.log"),
            maxBytes=10 * 1024 * 1024,
            backupCount=15,
            encoding="utf-8"
        )
        file_handler.setFormatter(LOG_FORMATTER)
        root_logger.addHandler(file_handler)

# 불필요 로거 레벨 설정
logging.getLogger("uvicorn").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
