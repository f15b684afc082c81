"""Agent profile endpoint."""

from src.models.agent import AgentProfile, AgentProfileData
from src.services.agent_gate import require_agent
from src.services.agents import update_agent_profile
from src.services.queries import AGENT_PROFILE_QUERY
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_GET(self):
        self.dispatch(self._load)

    def do_POST(self):
        self.dispatch(self._update)

    async def _load(self, identity, store):
        return await require_agent(identity, store, AGENT_PROFILE_QUERY, model=AgentProfile)

    async def _update(self, identity, store):
        data = AgentProfileData.model_validate(self.read_json())
        return await update_agent_profile(identity, store, data)
