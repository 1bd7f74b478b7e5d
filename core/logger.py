import logging
import os
from datetime import datetime

LOGS_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOGS_DIR, exist_ok=True)

LOG_FILE = os.path.join(
    LOGS_DIR, 
    f"log_{datetime.now().strftime('%Y-%m-%d')}.log"
)

formatter = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

logger = logging.getLogger("workplan_rag")
logger.setLevel(logging.INFO)

if not logger.handlers:
    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

def get_logger(name: str):
    return logger.getChild(name)
