"""FreshCart FastAPI application.

Single web server for every bounded context. Commands are processed
synchronously per request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (event handlers fire on commit)
#   - "production" → event_processing = "async" (event handlers fire via Engine)
from freshcart.domain import freshcart
from freshcart.web import create_app

freshcart.init()

app = create_app()
