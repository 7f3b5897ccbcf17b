"""Form controller: values, errors, touched flags and submission for one form.

The controller is the single writer of form state. Input adapters call
its mutation methods; renderers read snapshots or subscribe to them.

Usage::

    form = FormController(
        {"username": "", "password": ""},
        {"username": combine(required(), unique(is_free)), "password": PASSWORD},
        config=FormConfig(validate_on_change=True, debounce_ms=500),
    )
    form.subscribe(render)

    form.handle_change(FieldEvent("username", "alice"))  # debounced check
    form.handle_blur(FieldEvent("username"))             # immediate check
    await form.submit(create_account)

Triggers:

- change: validation is debounced per field by ``debounce_ms``.
- blur: the field is marked touched and validated right away, in a
  background task.
- submit: every ruled field is touched and the whole form validated
  before the handler runs.

Only the most recently started validation of a field may write that
field's error. Each start bumps a per-field generation number and a
result is applied only if its generation is still current when it
arrives, whatever order results arrive in.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from typing import Any, Self

from wren._internal.invoke import settle
from wren.config import FormConfig
from wren.errors import ConfigurationError, FormClosedError
from wren.events import FieldEvent
from wren.fields import FieldKind, coerce
from wren.scheduling import Debouncer
from wren.state import FormState
from wren.validation import Rule, safe_evaluate, validate

logger = logging.getLogger("wren.controller")

type Listener = Callable[[FormState], None]
type SubmitHandler = Callable[[dict[str, Any]], Awaitable[None] | None]


class FormController:
    """State and validation driver for a single form instance.

    Args:
        initial_values: Starting field values, restored by ``reset_form()``.
        rules: Field name to ``Rule``. Only ruled fields take part in
            ``validate_form()`` and are touched on submit.
        config: Trigger policy. Defaults to ``FormConfig()``.
        kinds: Field name to ``FieldKind`` for input coercion.
            Undeclared fields are ``TEXT``.

    Must be used from within a running asyncio event loop whenever a
    trigger schedules work. Close it (or use ``async with``) when the
    form goes away so pending timers never fire.
    """

    __slots__ = (
        "_closed",
        "_config",
        "_debouncer",
        "_errors",
        "_generations",
        "_initial",
        "_kinds",
        "_listeners",
        "_rules",
        "_submitting",
        "_tasks",
        "_touched",
        "_validating",
        "_values",
    )

    def __init__(
        self,
        initial_values: Mapping[str, Any] | None = None,
        rules: Mapping[str, Rule] | None = None,
        *,
        config: FormConfig | None = None,
        kinds: Mapping[str, FieldKind] | None = None,
    ) -> None:
        self._rules: dict[str, Rule] = dict(rules or {})
        for name, rule in self._rules.items():
            if not isinstance(rule, Rule):
                msg = f"Rule for field {name!r} must be a Rule, got {type(rule).__name__}"
                raise ConfigurationError(msg)

        self._config = config or FormConfig()
        self._kinds: dict[str, FieldKind] = dict(kinds or {})
        self._initial: dict[str, Any] = dict(initial_values or {})

        self._values: dict[str, Any] = dict(self._initial)
        self._errors: dict[str, str] = {}
        self._touched: dict[str, bool] = {}
        self._submitting = False

        # field -> generation of the latest validation started; never reset
        self._generations: dict[str, int] = {}
        self._validating: set[str] = set()

        self._debouncer = Debouncer()
        self._tasks: set[asyncio.Task[None]] = set()
        self._listeners: list[Listener] = []
        self._closed = False

    # -- Snapshots --

    @property
    def config(self) -> FormConfig:
        return self._config

    @property
    def rules(self) -> dict[str, Rule]:
        return dict(self._rules)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def touched(self) -> dict[str, bool]:
        return dict(self._touched)

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def validating(self) -> frozenset[str]:
        """Fields whose latest validation has not resolved yet."""
        return frozenset(self._validating)

    @property
    def is_valid(self) -> bool:
        return not any(self._errors.values())

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> FormState:
        return FormState(
            values=dict(self._values),
            errors=dict(self._errors),
            touched=dict(self._touched),
            submitting=self._submitting,
            validating=frozenset(self._validating),
        )

    def kind(self, field: str) -> FieldKind:
        return self._kinds.get(field, FieldKind.TEXT)

    # -- Input --

    def set_value(self, field: str, raw: Any) -> None:
        """Store coerced input for *field*; debounce validation if enabled."""
        if self._config.validate_on_change:
            self._ensure_open("schedule change validation")
        self._values[field] = coerce(self.kind(field), raw)
        self._notify()
        if self._config.validate_on_change:
            self._debouncer.schedule(
                field,
                self._config.debounce_ms,
                lambda: self.validate_field(field),
            )

    def set_touched(self, field: str, touched: bool = True) -> None:
        """Mark *field* touched; validate it immediately if blur validation is on."""
        validate_now = touched and self._config.validate_on_blur
        if validate_now:
            self._ensure_open("schedule blur validation")
        self._touched[field] = touched
        self._notify()
        if validate_now:
            self._spawn(self.validate_field(field))

    def handle_change(self, event: FieldEvent) -> None:
        self.set_value(event.name, event.raw)

    def handle_blur(self, event: FieldEvent) -> None:
        self.set_touched(event.name, True)

    def handle_submit(self, on_submit: SubmitHandler) -> Callable[..., Awaitable[None]]:
        """Return an async handler that submits the form with *on_submit*.

        The handler ignores its arguments, so it can be wired straight to
        an adapter's submit event.
        """

        async def handler(*_args: Any) -> None:
            await self.submit(on_submit)

        return handler

    # -- Direct overrides --

    def set_field_value(self, field: str, value: Any) -> None:
        """Store *value* as-is: no coercion, no validation."""
        self._values[field] = value
        self._notify()

    def set_field_error(self, field: str, message: str) -> None:
        """Set an error found outside the rules (e.g. a server-side check)."""
        self._errors[field] = message
        self._notify()

    def set_field_touched(self, field: str, touched: bool = True) -> None:
        """Set the touched flag without triggering validation."""
        self._touched[field] = touched
        self._notify()

    def clear_errors(self) -> None:
        self._errors = {}
        self._notify()

    # -- Validation --

    async def validate_field(self, field: str) -> None:
        """Validate the current value of *field* and record the result.

        Superseded calls finish quietly without touching ``errors``.
        A field without a rule resolves as valid.
        """
        value = self._values.get(field)
        generation = self._generations.get(field, 0) + 1
        self._generations[field] = generation
        self._validating.add(field)
        self._notify()

        rule = self._rules.get(field)
        error = None if rule is None else await safe_evaluate(field, value, rule)

        if self._generations.get(field) != generation:
            logger.debug("Discarding stale validation of %r (generation %d)", field, generation)
            return
        self._validating.discard(field)
        self._errors[field] = error or ""
        self._notify()

    async def validate_form(self) -> bool:
        """Validate every ruled field at once and replace ``errors``.

        Runs outside the debounce and generation machinery. Returns True
        only if every field passed. If the pass itself fails, the failure
        is logged, ``errors`` is left alone and the result is False.
        """
        try:
            result = await validate(dict(self._values), self._rules)
        except Exception:
            logger.exception("Form validation failed")
            return False
        self._errors = {field: result.errors.get(field, "") for field in self._rules}
        self._notify()
        return result.is_valid

    # -- Submission --

    async def submit(self, on_submit: SubmitHandler) -> None:
        """Touch, validate and, if valid, pass the values to *on_submit*.

        Calls made while a submission is in flight are ignored. Errors
        raised by *on_submit* are logged to ``wren.controller`` and not
        re-raised; the form stays as it was so the user can retry.
        """
        if self._submitting:
            logger.debug("Submit ignored: a submission is already in progress")
            return
        self._ensure_open("submit")

        self._submitting = True
        try:
            for field in self._rules:
                self._touched[field] = True
            self._notify()

            valid = True
            if self._config.validate_on_submit:
                valid = await self.validate_form()
            if valid:
                await settle(on_submit(dict(self._values)))
        except Exception:
            logger.exception("Form submission failed")
        finally:
            self._submitting = False
            self._notify()

    # -- Lifecycle --

    def reset_form(self, values: Mapping[str, Any] | None = None) -> None:
        """Restore *values* (or the initial values) and drop all other state.

        Pending debounced validations are cancelled and any validation
        still in flight will be discarded when it resolves.
        """
        self._debouncer.cancel_all()
        self._invalidate()
        self._values = dict(self._initial if values is None else values)
        self._errors = {}
        self._touched = {}
        self._submitting = False
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a fresh ``FormState`` after every change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_idle(self) -> None:
        """Wait until no background validation task is running.

        Pending debounce timers are not waited for.
        """
        while self._tasks or self._debouncer.has_running():
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            await self._debouncer.drain()

    def close(self) -> None:
        """Cancel pending timers and orphan in-flight validations."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel_all()
        self._invalidate()
        self._notify()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "closed" if self._closed else "open"
        return f"<FormController {len(self._rules)} rules, {status}>"

    # -- Internals --

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise FormClosedError(operation)

    def _invalidate(self) -> None:
        for field in self._generations:
            self._generations[field] += 1
        self._validating.clear()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _notify(self) -> None:
        if not self._listeners:
            return
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Form state listener %r failed", listener)
