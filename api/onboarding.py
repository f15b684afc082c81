"""Buyer onboarding (POST) and profile update (PUT)."""

from src.models.user import UserOnboardingData, UserProfileData
from src.services.users import complete_user_onboarding, update_user_profile
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_POST(self):
        self.dispatch(self._onboard)

    def do_PUT(self):
        self.dispatch(self._update)

    async def _onboard(self, identity, store):
        data = UserOnboardingData.model_validate(self.read_json())
        return await complete_user_onboarding(identity, store, data)

    async def _update(self, identity, store):
        data = UserProfileData.model_validate(self.read_json())
        return await update_user_profile(identity, store, data)
