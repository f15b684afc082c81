"""Agent leads endpoint: list (GET) and status update (PATCH)."""

from src.services.leads import list_agent_leads, update_lead_status
from src.utils.errors import InvalidRequestError
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_GET(self):
        self.dispatch(list_agent_leads)

    def do_PATCH(self):
        self.dispatch(self._update_status)

    async def _update_status(self, identity, store):
        body = self.read_json()
        lead_id = body.get("leadId")
        if not lead_id:
            raise InvalidRequestError("leadId is required")
        return await update_lead_status(identity, store, lead_id, body.get("status", ""))
