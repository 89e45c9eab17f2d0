"""
Turnstile widget loader.

The Turnstile script is injected asynchronously, so its runtime may not
exist yet when the form mounts. The loader looks it up on a fixed interval
(bounded number of attempts), renders the widget once, and keeps the most
recent token in a single slot that the form reads without waiting.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

MIN_POLL_INTERVAL = 0.2
DEFAULT_MAX_ATTEMPTS = 50


class ChallengeRuntime(Protocol):
    """What the injected Turnstile script exposes"""

    def render(self, container: Any, *, sitekey: str, callback: Callable[[str], None], size: str = "normal") -> Any:
        ...

    def reset(self) -> None:
        ...


class LoaderStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"
    DISABLED = "disabled"


class TurnstileWidgetLoader:
    """
    Bridge between the contact form and the Turnstile runtime.

    Args:
        runtime_lookup: Returns the runtime once the script has loaded, else None
        container: Where the widget is rendered
        site_key: Public site key; without it nothing is rendered
        poll_interval: Seconds between lookups (never below 0.2)
        max_attempts: Lookups after the first before giving up
        on_token: Called after a new token is stored
    """

    def __init__(
        self,
        runtime_lookup: Callable[[], Optional[ChallengeRuntime]],
        container: Any,
        site_key: Optional[str],
        poll_interval: float = MIN_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        on_token: Optional[Callable[[str], None]] = None
    ):
        self.runtime_lookup = runtime_lookup
        self.container = container
        self.site_key = site_key
        self.poll_interval = max(poll_interval, MIN_POLL_INTERVAL)
        self.max_attempts = max_attempts
        self.on_token = on_token
        self.status = LoaderStatus.PENDING
        # On once the widget has handed over a token, off again after reset()
        self.challenge_visible = False

        self._runtime: Optional[ChallengeRuntime] = None
        self._token: Optional[str] = None
        self._ready: Optional[asyncio.Future] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._mounted = False

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_ready(self) -> bool:
        return self.status is LoaderStatus.READY

    def mount(self) -> None:
        """Start looking for the runtime. Must run inside the event loop."""
        if self._mounted:
            return
        self._mounted = True
        self._ready = asyncio.get_running_loop().create_future()

        if not self.site_key:
            logger.error("Turnstile site key is not configured. Set TURNSTILE_SITE_KEY.")
            self.status = LoaderStatus.DISABLED
            self._resolve(False)
            return

        if self._try_render():
            return

        self._poll_task = asyncio.create_task(self._poll())

    def unmount(self) -> None:
        """Stop polling; late callbacks from the runtime are ignored"""
        self._mounted = False
        if self._poll_task and not self._poll_task.done():
            self._poll_task.cancel()
        self._poll_task = None
        self._resolve(False)

    async def wait_ready(self) -> bool:
        """True once rendered, False if the runtime never showed up or no site key"""
        if self._ready is None:
            raise RuntimeError("Loader is not mounted")
        return await asyncio.shield(self._ready)

    def reset(self) -> None:
        """Drop the current token and make the widget issue a new challenge"""
        self._token = None
        self.challenge_visible = False
        if self._runtime is not None:
            self._runtime.reset()

    async def _poll(self) -> None:
        for _ in range(self.max_attempts):
            await asyncio.sleep(self.poll_interval)
            if self._try_render():
                return

        self.status = LoaderStatus.FAILED
        logger.error(f"Turnstile runtime did not load after {self.max_attempts} attempts")
        self._resolve(False)

    def _try_render(self) -> bool:
        runtime = self.runtime_lookup()
        if runtime is None or not callable(getattr(runtime, "render", None)):
            return False

        runtime.render(
            self.container,
            sitekey=self.site_key,
            callback=self._on_token,
            # Let Turnstile size itself to the container width
            size="flexible"
        )
        self._runtime = runtime
        self.status = LoaderStatus.READY
        self._resolve(True)
        return True

    def _on_token(self, token: str) -> None:
        if not self._mounted:
            return
        self._token = token
        self.challenge_visible = True
        if self.on_token:
            self.on_token(token)

    def _resolve(self, value: bool) -> None:
        if self._ready is not None and not self._ready.done():
            self._ready.set_result(value)
