"""
Contact form controller.

State machine:
    idle -> validation_failed | awaiting_token | submitting
    submitting -> success -> counting_down(10 .. 0) -> idle (dialog closed)
    submitting -> error (fields kept, widget reset)

All timers are asyncio tasks owned by the controller and cancelled on
close, reopen and unmount.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from app.client.api_client import ContactApiClient, SubmissionRejected
from app.client.turnstile_loader import TurnstileWidgetLoader
from app.models.contact import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH, is_valid_email

logger = logging.getLogger(__name__)

COUNTDOWN_SECONDS = 10
SUCCESS_TO_COUNTDOWN_DELAY = 1.0
TICK_INTERVAL = 1.0

SUCCESS_MESSAGE = "Message sent. I'll get back to you as soon as I can."
FIX_ERRORS_MESSAGE = "Please fix the errors highlighted below."
VERIFY_MESSAGE = "Please complete the verification."
EMAIL_REQUIRED = "Please provide an email address."
EMAIL_INVALID = "Please provide a valid email address."
MESSAGE_REQUIRED = "Please provide a message."
MESSAGE_TOO_SHORT = "Message is too short."
MESSAGE_TOO_LONG = "Message is a bit too long. Please shorten it."

FIELDS = ("email", "phone", "message", "honeypot")
NEXT_FIELD = {"email": "phone", "phone": "message"}


class Phase(str, Enum):
    IDLE = "idle"
    VALIDATION_FAILED = "validation_failed"
    AWAITING_TOKEN = "awaiting_token"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    COUNTING_DOWN = "counting_down"
    ERROR = "error"


# Phases in which inputs are locked and submit is ignored
LOCKED_PHASES = {Phase.SUBMITTING, Phase.SUCCESS, Phase.COUNTING_DOWN}


@dataclass(frozen=True)
class SubmissionState:
    phase: Phase
    seconds_remaining: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "SubmissionState":
        return cls(Phase.IDLE)

    @classmethod
    def counting_down(cls, seconds: int) -> "SubmissionState":
        return cls(Phase.COUNTING_DOWN, seconds_remaining=seconds)

    @classmethod
    def error(cls, message: str) -> "SubmissionState":
        return cls(Phase.ERROR, message=message)


class KeyAction(str, Enum):
    FOCUS_NEXT = "focus_next"
    NEWLINE = "newline"
    SUBMITTED = "submitted"
    IGNORED = "ignored"


def validate_fields(email: str, message: str) -> Dict[str, str]:
    """Field-scoped errors for trimmed values; empty when the form may be sent"""
    errors = {}
    if not email:
        errors["email"] = EMAIL_REQUIRED
    elif not is_valid_email(email):
        errors["email"] = EMAIL_INVALID
    if not message:
        errors["message"] = MESSAGE_REQUIRED
    elif len(message) < MESSAGE_MIN_LENGTH:
        errors["message"] = MESSAGE_TOO_SHORT
    elif len(message) > MESSAGE_MAX_LENGTH:
        errors["message"] = MESSAGE_TOO_LONG
    return errors


class ContactFormController:
    """Field state, validation and submission lifecycle of the contact dialog"""

    def __init__(
        self,
        loader: TurnstileWidgetLoader,
        api: ContactApiClient,
        countdown_seconds: int = COUNTDOWN_SECONDS,
        success_delay: float = SUCCESS_TO_COUNTDOWN_DELAY,
        tick_interval: float = TICK_INTERVAL,
        on_change: Optional[Callable[[SubmissionState], None]] = None
    ):
        self.loader = loader
        self.api = api
        self.countdown_seconds = countdown_seconds
        self.success_delay = success_delay
        self.tick_interval = tick_interval
        self.on_change = on_change

        self.email = ""
        self.phone = ""
        self.message = ""
        self.honeypot = ""
        self.field_errors: Dict[str, str] = {}
        self.status_message: Optional[str] = None
        self.is_open = False
        self.state = SubmissionState.idle()
        self.countdown_task: Optional[asyncio.Task] = None
        self._unmounted = False

    # ─── derived view state ─────────────────────────────────────

    @property
    def inputs_disabled(self) -> bool:
        return self.state.phase in LOCKED_PHASES

    @property
    def submit_disabled(self) -> bool:
        return self.inputs_disabled or not self.loader.token

    @property
    def close_disabled(self) -> bool:
        return self.state.phase is Phase.SUBMITTING

    @property
    def countdown_label(self) -> Optional[str]:
        if self.state.phase is not Phase.COUNTING_DOWN:
            return None
        n = self.state.seconds_remaining
        return f"Closing in {n} {'second' if n == 1 else 'seconds'}…"

    # ─── dialog lifecycle ───────────────────────────────────────

    def mount(self) -> None:
        self._unmounted = False
        self.loader.mount()

    def unmount(self) -> None:
        self._unmounted = True
        self._cancel_timers()
        self.loader.unmount()

    def open(self) -> None:
        """Show the dialog; anything but a running countdown starts fresh"""
        if self.state.phase is Phase.COUNTING_DOWN or (self.is_open and self.close_disabled):
            self.is_open = True
            return
        self._reset()
        self.is_open = True

    def close(self) -> bool:
        """Hide the dialog. Refused while a request is in flight."""
        if self.close_disabled:
            return False
        self.is_open = False
        if self.state.phase in (Phase.SUCCESS, Phase.COUNTING_DOWN):
            self._reset()
        return True

    def update_field(self, name: str, value: str) -> bool:
        if name not in FIELDS:
            raise ValueError(f"Unknown field: {name}")
        if self.inputs_disabled:
            return False
        setattr(self, name, value)
        return True

    # ─── submission ─────────────────────────────────────────────

    async def submit(self) -> SubmissionState:
        if self.state.phase in LOCKED_PHASES:
            return self.state

        self.field_errors = {}
        self.status_message = None

        email = self.email.strip()
        message = self.message.strip()
        phone = self.phone.strip()

        errors = validate_fields(email, message)
        if errors:
            self.field_errors = errors
            self.status_message = FIX_ERRORS_MESSAGE
            self._transition(SubmissionState(Phase.VALIDATION_FAILED))
            return self.state

        token = self.loader.token
        if not token:
            self.status_message = VERIFY_MESSAGE
            self._transition(SubmissionState(Phase.AWAITING_TOKEN))
            return self.state

        payload = {"email": email, "message": message, "turnstileToken": token}
        if phone:
            payload["phone"] = phone
        honeypot = self.honeypot.strip()
        if honeypot:
            payload["honeypot"] = honeypot

        self._transition(SubmissionState(Phase.SUBMITTING))
        try:
            await self.api.send(payload)
        except SubmissionRejected as e:
            if self._unmounted:
                return self.state
            # Tokens are single-use: force a new challenge before retrying
            self.loader.reset()
            self.status_message = e.message
            self._transition(SubmissionState.error(e.message))
            return self.state

        if self._unmounted:
            return self.state

        self._clear_fields()
        self.status_message = SUCCESS_MESSAGE
        self._transition(SubmissionState(Phase.SUCCESS))
        self.countdown_task = asyncio.create_task(self._run_countdown())
        return self.state

    async def handle_enter(self, field: str, shift: bool = False) -> KeyAction:
        """Enter key in a field: move focus, insert a newline, or submit"""
        if field in NEXT_FIELD:
            return KeyAction.FOCUS_NEXT
        if field != "message":
            return KeyAction.IGNORED
        if shift:
            return KeyAction.NEWLINE

        ready = (
            is_valid_email(self.email.strip())
            and self.message.strip()
            and self.loader.token
            and not self.inputs_disabled
        )
        if not ready:
            return KeyAction.IGNORED
        await self.submit()
        return KeyAction.SUBMITTED

    # ─── internals ──────────────────────────────────────────────

    async def _run_countdown(self) -> None:
        await asyncio.sleep(self.success_delay)
        remaining = self.countdown_seconds
        self._transition(SubmissionState.counting_down(remaining))

        while remaining > 0:
            await asyncio.sleep(self.tick_interval)
            remaining -= 1
            self._transition(SubmissionState.counting_down(remaining))

        logger.debug("Countdown finished, closing contact dialog")
        self.countdown_task = None
        self.is_open = False
        self._reset()

    def _transition(self, state: SubmissionState) -> None:
        self.state = state
        if self.on_change:
            self.on_change(state)

    def _cancel_timers(self) -> None:
        task = self.countdown_task
        self.countdown_task = None
        if task and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _clear_fields(self) -> None:
        self.email = ""
        self.phone = ""
        self.message = ""
        self.honeypot = ""
        self.field_errors = {}

    def _reset(self) -> None:
        self._cancel_timers()
        self._clear_fields()
        self.status_message = None
        self.loader.reset()
        self._transition(SubmissionState.idle())
