"""Agent onboarding endpoint: page load (GET) and form submission (POST)."""

from src.models.agent import AgentOnboardingData
from src.services.agent_gate import load_agent_onboarding
from src.services.agents import complete_agent_onboarding
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_GET(self):
        self.dispatch(load_agent_onboarding)

    def do_POST(self):
        self.dispatch(self._complete)

    async def _complete(self, identity, store):
        data = AgentOnboardingData.model_validate(self.read_json())
        return await complete_agent_onboarding(identity, store, data)
