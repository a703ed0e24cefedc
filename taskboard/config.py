# taskboard/config.py

import os

from dotenv import load_dotenv

# ================= ENV =================
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))
load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY missing in .env!")

# If DATABASE_URL is NOT provided -> use local SQLite
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./app.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# ================= STORAGE =================
STORAGE_DIR = os.getenv("STORAGE_DIR", "./uploads")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
UPLOAD_URL_EXPIRE_MINUTES = int(os.getenv("UPLOAD_URL_EXPIRE_MINUTES", "60"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# ================= HTTP =================
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
