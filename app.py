"""
App assembly entry point.

Loads ``.env`` before the app is imported so configuration read at import time
(log level, CORS origins, database URL) sees it, then re-exports the FastAPI
``app`` from ``crisis_alert.api.main``.

    uvicorn app:app --reload
"""
from dotenv import load_dotenv

load_dotenv()

from crisis_alert.api.main import app  # noqa: E402,F401
