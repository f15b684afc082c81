"""Agent listings endpoint.

GET lists the agent's listings, or loads one for editing with ?id=.
POST creates a listing; PUT ?id= updates one.
"""

from src.models.property import ListingInput
from src.services.listings import create_listing, list_agent_listings, load_listing_for_edit, update_listing
from src.utils.http import ApiHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(ApiHandler):

    def do_GET(self):
        self.dispatch(self._load)

    def do_POST(self):
        self.dispatch(self._create)

    def do_PUT(self):
        self.dispatch(self._update)

    async def _load(self, identity, store):
        listing_id = self.query_param("id")
        if listing_id:
            return await load_listing_for_edit(identity, store, listing_id)
        return await list_agent_listings(identity, store)

    async def _create(self, identity, store):
        data = ListingInput.model_validate(self.read_json())
        return await create_listing(identity, store, data)

    async def _update(self, identity, store):
        listing_id = self.require_query_param("id")
        data = ListingInput.model_validate(self.read_json())
        return await update_listing(identity, store, listing_id, data)
