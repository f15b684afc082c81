"""Clerk webhook endpoint for Vercel."""

import json

from src.services.clerk_events import handle_clerk_event
from src.services.document_store import DocumentStore
from src.services.identity import ClerkIdentity
from src.services.webhook_verifier import verify_webhook_request
from src.utils.http import ApiHandler, run_async
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
_logger = get_structured_logger(__name__)


class handler(ApiHandler):
    """Vercel serverless function handler for Clerk events."""

    def do_POST(self):
        """Handle POST request from Clerk (delivered by Svix)."""
        msg_id = self.headers.get("svix-id")
        timestamp = self.headers.get("svix-timestamp")
        signature = self.headers.get("svix-signature")

        with correlation_context(msg_id) as correlation_id:
            self._correlation_id = correlation_id

            if not msg_id or not timestamp or not signature:
                _logger.warning(
                    "Webhook missing svix headers",
                    has_id=bool(msg_id),
                    has_timestamp=bool(timestamp),
                    has_signature=bool(signature),
                )
                self.send_json(400, {"error": "missing svix headers"})
                return

            try:
                raw_body = self.read_body()

                if not verify_webhook_request(msg_id, timestamp, signature, raw_body):
                    self.send_json(400, {"error": "invalid signature"})
                    return

                try:
                    event = json.loads(raw_body) if raw_body else {}
                except json.JSONDecodeError:
                    self.send_json(400, {"error": "invalid payload"})
                    return

                event_type = event.get("type")
                _logger.info("Received Clerk event", event_type=event_type)

                outcome = run_async(handle_clerk_event(event, ClerkIdentity(), DocumentStore()))
                _logger.info("Clerk event processed", event_type=event_type, outcome=outcome)

                self.send_json(200, {"ok": True, "outcome": outcome})

            except Exception as e:
                _logger.error(f"Error processing Clerk event: {e}", exc_info=True)
                self.send_json(500, {"error": "internal server error"})

    def do_GET(self):
        """Handle GET request (health check)."""
        self.send_json(200, {"status": "ok", "endpoint": "webhooks/clerk"})
