"""Agent analytics endpoint."""

from src.services.analytics import get_agent_analytics
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_GET(self):
        self.dispatch(get_agent_analytics)
