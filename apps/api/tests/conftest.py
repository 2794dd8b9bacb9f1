import os

# app.main builds an application at import time; tests run against the in-memory backend.
os.environ.setdefault("TASKBOARD_BACKEND", "memory")
