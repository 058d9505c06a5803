import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = Path(os.getenv("DATA_DIR", "data"))
DATA_DIR.mkdir(exist_ok=True)

DB_URL = os.getenv("DB_URL", f"sqlite:///{(DATA_DIR / 'tilecost.db').as_posix()}")
DEBUG = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
