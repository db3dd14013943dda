import logging

import uvicorn

from thaimap.api.server import app
from thaimap.shared.config import settings

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    port = settings.PORT
    print(f"Starting ThaiMap Boundary API on port {port}...")
    uvicorn.run(app, host="0.0.0.0", port=port)
