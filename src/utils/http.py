"""Shared plumbing for the Vercel route handlers in api/."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ValidationError

from src.models.result import ActionResult
from src.services.document_store import DocumentStore
from src.services.identity import ClerkIdentity, IdentityProvider
from src.services.route_guard import guard_route
from src.utils.errors import InvalidRequestError, NotFoundError, RedirectRequired
from src.utils.logging import correlation_context, get_structured_logger
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)

Action = Callable[[IdentityProvider, DocumentStore], Awaitable[Any]]


def run_async(coro: Awaitable[Any]) -> Any:
    """Run a coroutine to completion from a synchronous handler method."""
    return asyncio.run(coro)


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    return value


class ApiHandler(BaseHTTPRequestHandler):
    """
    Base for route handlers: JSON in and out, redirects, auth context.

    Subclasses implement do_<METHOD> by passing an async action to
    `dispatch`; the action receives the request's identity and the document
    store and returns either an ActionResult or plain data.
    """

    _correlation_id: Optional[str] = None

    def identity(self) -> IdentityProvider:
        return ClerkIdentity.from_headers(self.headers)

    def store(self) -> DocumentStore:
        return DocumentStore()

    @property
    def route(self) -> str:
        return urlsplit(self.path).path.rstrip("/") or "/"

    def query_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = parse_qs(urlsplit(self.path).query).get(name)
        return values[0] if values else default

    def require_query_param(self, name: str) -> str:
        value = self.query_param(name)
        if not value:
            raise InvalidRequestError(f"Missing query parameter: {name}")
        return value

    def read_body(self) -> str:
        content_length = int(self.headers.get('Content-Length', 0) or 0)
        return self.rfile.read(content_length).decode('utf-8') if content_length > 0 else ""

    def read_json(self) -> dict:
        raw_body = self.read_body()
        if not raw_body:
            return {}
        try:
            body = json.loads(raw_body)
        except json.JSONDecodeError:
            raise InvalidRequestError("Request body is not valid JSON")
        if not isinstance(body, dict):
            raise InvalidRequestError("Request body must be a JSON object")
        return body

    def send_json(self, status: int, body: Any, headers: Optional[dict[str, str]] = None) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        if self._correlation_id:
            self.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, self._correlation_id)
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(json.dumps(body).encode('utf-8'))

    def send_redirect(self, location: str, status: int = 307) -> None:
        self.send_json(status, {"redirect": location}, headers={"Location": location})

    def send_result(self, result: ActionResult) -> None:
        headers = {"Location": result.redirect} if result.success and result.redirect else None
        self.send_json(result.http_status, result.to_dict(), headers=headers)

    def dispatch(self, action: Action) -> None:
        """Guard the route, run `action`, and translate its outcome to HTTP."""
        with correlation_context(self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)) as correlation_id:
            self._correlation_id = correlation_id
            try:
                identity = self.identity()
                store = self.store()

                async def run():
                    await guard_route(self.route, identity)
                    return await action(identity, store)

                outcome = run_async(run())
            except RedirectRequired as e:
                self.send_redirect(e.location)
                return
            except ValidationError as e:
                self.send_json(400, {"error": "invalid input", "details": json.loads(e.json(include_url=False))})
                return
            except InvalidRequestError as e:
                self.send_json(400, {"error": str(e)})
                return
            except NotFoundError as e:
                self.send_json(404, {"error": "not found", "message": str(e)})
                return
            except Exception as e:
                logger.exception("Unhandled error", route=self.route, method=self.command, error=str(e))
                self.send_json(500, {"error": "internal server error"})
                return

            if isinstance(outcome, ActionResult):
                self.send_result(outcome)
            else:
                self.send_json(200, {"data": to_jsonable(outcome)})

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(format % args, route=self.path)
