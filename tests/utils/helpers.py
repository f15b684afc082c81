"""Test helper functions."""

import base64
import hashlib
import hmac
import io
import json
import time
from typing import Any, Dict, Optional, Tuple

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa


def generate_webhook_signature(secret: str, msg_id: str, timestamp: str, body: str) -> str:
    """Generate a valid Svix signature header value for testing."""
    key = base64.b64decode(secret[len("whsec_"):] if secret.startswith("whsec_") else secret)
    digest = hmac.new(key, f"{msg_id}.{timestamp}.{body}".encode('utf-8'), hashlib.sha256).digest()
    return f"v1,{base64.b64encode(digest).decode('utf-8')}"


def create_webhook_headers(secret: str, body: str, msg_id: str = "msg_test123", timestamp: Optional[str] = None) -> Dict[str, str]:
    timestamp = timestamp or str(int(time.time()))
    return {
        "svix-id": msg_id,
        "svix-timestamp": timestamp,
        "svix-signature": generate_webhook_signature(secret, msg_id, timestamp, body),
        "Content-Type": "application/json",
    }


def create_clerk_event(event_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create a Clerk webhook payload for testing."""
    return {
        "type": event_type,
        "object": "event",
        "data": data,
    }


def generate_rsa_keypair() -> Tuple[str, str]:
    """(private PEM, public PEM) for signing test session tokens."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('utf-8')
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode('utf-8')
    return private_pem, public_pem


def create_session_token(private_pem: str, user_id: str, plans: str = "", expires_in: int = 300, **claims: Any) -> str:
    """Clerk-shaped session JWT."""
    now = int(time.time())
    payload = {"sub": user_id, "iat": now, "nbf": now, "exp": now + expires_in, "pla": plans}
    payload.update(claims)
    return jwt.encode(payload, private_pem, algorithm="RS256")


class MockSocket:
    """Socket stand-in: serves one raw request, collects the raw response."""

    def __init__(self, request: bytes):
        self._request = request
        self.sent = bytearray()

    def makefile(self, *args, **kwargs):
        return io.BytesIO(self._request)

    def sendall(self, data):
        self.sent.extend(data)

    def close(self):
        pass


def invoke_handler(
    handler_class,
    method: str = "GET",
    path: str = "/",
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Run a BaseHTTPRequestHandler subclass against one request and parse the response."""
    if body is None:
        raw_body = b""
    elif isinstance(body, (dict, list)):
        raw_body = json.dumps(body).encode('utf-8')
    elif isinstance(body, str):
        raw_body = body.encode('utf-8')
    else:
        raw_body = body

    header_lines = dict(headers or {})
    header_lines.setdefault("Host", "localhost")
    header_lines["Content-Length"] = str(len(raw_body))
    header_lines["Connection"] = "close"

    request = f"{method} {path} HTTP/1.1\r\n"
    request += "".join(f"{name}: {value}\r\n" for name, value in header_lines.items())
    request += "\r\n"

    socket = MockSocket(request.encode('utf-8') + raw_body)
    handler_class(socket, ("127.0.0.1", 8000), None)

    head, _, response_body = bytes(socket.sent).partition(b"\r\n\r\n")
    lines = head.decode('iso-8859-1').split("\r\n")
    status = int(lines[0].split(" ")[1])
    response_headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        response_headers[name.strip()] = value.strip()

    text = response_body.decode('utf-8')
    return {
        "status": status,
        "headers": response_headers,
        "raw_body": text,
        "json": json.loads(text) if text else None,
    }
