"""Buyer inquiry endpoint."""

from src.services.leads import create_lead
from src.utils.errors import InvalidRequestError
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_POST(self):
        self.dispatch(self._create)

    async def _create(self, identity, store):
        property_id = self.read_json().get("propertyId")
        if not property_id:
            raise InvalidRequestError("propertyId is required")
        return await create_lead(identity, store, property_id)
