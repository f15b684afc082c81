"""Health check endpoint."""

from src.utils.config import get_environment
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()

SERVICE_NAME = "homefind-backend"


class handler(ApiHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        self.send_json(200, {"status": "ok", "service": SERVICE_NAME, "environment": get_environment()})

    def do_POST(self):
        """Same as GET for health check."""
        self.do_GET()
