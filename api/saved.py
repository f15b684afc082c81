"""Saved listings endpoint.

GET returns saved property IDs (or the properties themselves with ?expand=1);
POST toggles one property.
"""

from src.services.users import get_user_saved_ids, list_saved_properties, toggle_saved_listing
from src.utils.errors import InvalidRequestError
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_GET(self):
        self.dispatch(self._load)

    def do_POST(self):
        self.dispatch(self._toggle)

    async def _load(self, identity, store):
        if self.query_param("expand") in ("1", "true"):
            return await list_saved_properties(identity, store)
        return await get_user_saved_ids(identity, store)

    async def _toggle(self, identity, store):
        property_id = self.read_json().get("propertyId")
        if not property_id:
            raise InvalidRequestError("propertyId is required")
        return await toggle_saved_listing(identity, store, property_id)
