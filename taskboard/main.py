# taskboard/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.config import FRONTEND_ORIGIN, LOG_LEVEL
from taskboard.database import init_db

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("taskboard")


# ---------------- DATABASE INIT ----------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Checking database models...")
    init_db()
    logger.info("Database ready.")
    yield


app = FastAPI(title="Taskboard API", lifespan=lifespan)

# ---------------- CORS ----------------
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

if FRONTEND_ORIGIN:
    origins.append(FRONTEND_ORIGIN)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- ROUTERS ----------------
from taskboard.auth.auth_router import router as auth_router  # noqa: E402
from taskboard.user.user_router import router as user_router  # noqa: E402
from taskboard.project.project_router import router as project_router  # noqa: E402
from taskboard.category.category_router import router as category_router  # noqa: E402
from taskboard.task.task_router import router as task_router  # noqa: E402
from taskboard.comment.comment_router import router as comment_router  # noqa: E402
from taskboard.calendar.calendar_router import router as calendar_router  # noqa: E402
from taskboard.notification.notification_router import router as notification_router  # noqa: E402
from taskboard.storage.storage_router import router as storage_router  # noqa: E402

app.include_router(auth_router, prefix="/auth")
app.include_router(user_router)
app.include_router(project_router)
app.include_router(category_router)
app.include_router(task_router)
app.include_router(comment_router)
app.include_router(calendar_router)
app.include_router(notification_router)
app.include_router(storage_router)


# ---------------- ROOT ----------------
@app.get("/")
def read_root():
    return {"message": "Taskboard API running"}


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
