"""Form state: values, errors and touched flags for one form."""
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from gaia.client.validation import Rules, snapshot, validate_field, validate_form

logger = logging.getLogger(__name__)

SubmitHandler = Callable[[Mapping[str, Any]], Awaitable[None]]


class FormState:
    """
    Value bag plus validation bookkeeping for a single form.

    Errors are only kept for fields that currently fail. Editing a field
    clears its error until the next validation.
    """

    def __init__(self, initial_values: Optional[Mapping[str, Any]] = None, rules: Optional[Rules] = None):
        self.initial_values = dict(initial_values or {})
        self.rules: Rules = rules or {}
        self.values: Dict[str, Any] = dict(self.initial_values)
        self.errors: Dict[str, str] = {}
        self.touched: Dict[str, bool] = {}
        self.is_submitting = False
        self.submit_count = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def handle_change(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.errors.pop(name, None)

    def handle_blur(self, name: str) -> Optional[str]:
        """Mark `name` touched and validate it against the whole bag."""
        self.touched[name] = True
        rule = self.rules.get(name)
        if rule is None:
            return None

        error = validate_field(name, rule, snapshot(self.values))
        if error:
            self.errors[name] = error
        else:
            self.errors.pop(name, None)
        return error

    def set_field_value(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.errors.pop(name, None)

    def set_field_error(self, name: str, error: Optional[str]) -> None:
        if error:
            self.errors[name] = error
        else:
            self.errors.pop(name, None)

    def set_multiple_values(self, values: Mapping[str, Any]) -> None:
        self.values.update(values)
        for name in values:
            self.errors.pop(name, None)

    def reset(self) -> None:
        self.values = dict(self.initial_values)
        self.errors = {}
        self.touched = {}
        self.is_submitting = False

    def validate(self) -> Dict[str, str]:
        self.errors = validate_form(self.values, self.rules)
        return dict(self.errors)

    async def handle_submit(self, on_submit: SubmitHandler) -> bool:
        """
        Validate every field and call `on_submit` with the values when clean.

        Returns True when the form was valid and submitted. Exceptions from
        `on_submit` propagate to the caller.
        """
        self.submit_count += 1
        self.touched.update({name: True for name in self.rules})

        if self.validate():
            return False

        self.is_submitting = True
        try:
            await on_submit(dict(self.values))
        finally:
            self.is_submitting = False
        return True
