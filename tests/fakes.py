"""Fakes for the outbound services and the browser-side challenge runtime."""

import httpx

from app.config import Settings

VERIFY_HOST = "challenges.cloudflare.com"
DELIVERY_HOST = "formspree.io"


class FakeUpstream:
    """Stands in for Turnstile and Formspree behind an httpx.MockTransport."""

    def __init__(self):
        self.verify_calls: list[httpx.Request] = []
        self.delivery_calls: list[httpx.Request] = []
        self.verify_status = 200
        self.verify_body = {"success": True}
        self.verify_exception = None
        self.delivery_status = 200
        self.delivery_body = {"ok": True}
        self.delivery_exception = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == VERIFY_HOST:
            self.verify_calls.append(request)
            if self.verify_exception:
                raise self.verify_exception
            return _respond(self.verify_status, self.verify_body)
        if request.url.host == DELIVERY_HOST:
            self.delivery_calls.append(request)
            if self.delivery_exception:
                raise self.delivery_exception
            return _respond(self.delivery_status, self.delivery_body)
        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeTurnstile:
    """Minimal Turnstile runtime: records renders, hands out tokens on demand."""

    def __init__(self):
        self.renders = []
        self.reset_count = 0
        self._callback = None

    def render(self, container, *, sitekey, callback, size="normal"):
        self.renders.append({"container": container, "sitekey": sitekey, "size": size})
        self._callback = callback

    def reset(self):
        self.reset_count += 1

    def solve(self, token: str) -> None:
        """Simulate the user completing the challenge."""
        self._callback(token)


def _respond(status: int, body) -> httpx.Response:
    if isinstance(body, (dict, list)):
        return httpx.Response(status, json=body)
    return httpx.Response(status, text=body or "")


def make_settings(**overrides) -> Settings:
    values = {
        "turnstile_secret_key": "secret-key",
        "turnstile_site_key": "site-key",
        "formspree_form_id": "form-123",
        "rate_limit_enabled": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
