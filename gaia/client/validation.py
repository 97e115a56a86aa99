"""
Form validation rule engine

Each field is described by a `Rule`. Rules are evaluated against a read-only
snapshot of the whole value bag, so a rule may look at sibling fields (for
example, card fields are only required while the card payment method is
selected).

Evaluation order for one field, first failure wins:

    required -> empty & optional (stop) -> min_length -> max_length
             -> pattern -> validate -> email -> match

Fields without a rule are never validated.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Pattern, Union

Values = Mapping[str, Any]
RequiredPredicate = Callable[[Values], bool]
CustomValidator = Callable[[Any, Values], Optional[str]]

# RFC 5322 compliant
EMAIL_REGEX = re.compile(
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))"
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)
INDIAN_PHONE_REGEX = re.compile(r"^[6-9]\d{9}$")
INDIAN_POSTAL_CODE_REGEX = re.compile(r"^[1-9][0-9]{5}$")

WEAK_PASSWORD_MESSAGE = (
    "Consider using uppercase letters, numbers, and special characters for a stronger password"
)

CARD_PATTERNS = (
    ("visa", re.compile(r"^4")),
    ("mastercard", re.compile(r"^5[1-5]")),
    ("amex", re.compile(r"^3[47]")),
    ("discover", re.compile(r"^6(?:011|5)")),
    ("dinersclub", re.compile(r"^3(?:0[0-5]|[68])")),
    ("jcb", re.compile(r"^(?:2131|1800|35)")),
)


@dataclass(frozen=True)
class Rule:
    """Validation rule for a single form field."""
    required: Union[bool, RequiredPredicate] = False
    required_message: Optional[str] = None
    min_length: Optional[int] = None
    min_length_message: Optional[str] = None
    max_length: Optional[int] = None
    max_length_message: Optional[str] = None
    pattern: Optional[Union[str, Pattern]] = None
    pattern_message: Optional[str] = None
    validate: Optional[CustomValidator] = None
    email: bool = False
    email_message: Optional[str] = None
    match: Optional[str] = None
    match_message: Optional[str] = None

    def is_required(self, values: Values) -> bool:
        if callable(self.required):
            return bool(self.required(values))
        return bool(self.required)


Rules = Mapping[str, Rule]


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _matches(pattern: Union[str, Pattern], value: Any) -> bool:
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return compiled.search(str(value)) is not None


def snapshot(values: Values) -> Values:
    """Read-only copy of a value bag."""
    return MappingProxyType(dict(values))


def validate_field(name: str, rule: Rule, values: Values) -> Optional[str]:
    """Return the first error message for `name`, or None when it passes."""
    value = values.get(name)

    if rule.is_required(values) and _is_empty(value):
        return rule.required_message or f"{name} is required"

    if _is_empty(value):
        return None

    if rule.min_length is not None and len(str(value)) < rule.min_length:
        return rule.min_length_message or f"{name} must be at least {rule.min_length} characters"

    if rule.max_length is not None and len(str(value)) > rule.max_length:
        return rule.max_length_message or f"{name} must not exceed {rule.max_length} characters"

    if rule.pattern is not None and not _matches(rule.pattern, value):
        return rule.pattern_message or f"{name} format is invalid"

    if rule.validate is not None:
        error = rule.validate(value, values)
        if error:
            return error

    if rule.email and not is_valid_email(value):
        return rule.email_message or "Please enter a valid email address"

    if rule.match is not None and value != values.get(rule.match):
        return rule.match_message or f"{name} does not match {rule.match}"

    return None


def validate_form(values: Values, rules: Rules) -> Dict[str, str]:
    """Validate every field that has a rule; returns field -> message for failures only."""
    frozen = snapshot(values)
    errors = {}
    for name, rule in rules.items():
        error = validate_field(name, rule, frozen)
        if error:
            errors[name] = error
    return errors


# =============================================================================
# HELPERS
# =============================================================================

def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and EMAIL_REGEX.match(email.lower()) is not None


def is_valid_indian_phone(phone: Any) -> bool:
    return isinstance(phone, str) and INDIAN_PHONE_REGEX.match(phone) is not None


def is_valid_indian_postal_code(postal_code: Any) -> bool:
    return isinstance(postal_code, str) and INDIAN_POSTAL_CODE_REGEX.match(postal_code) is not None


@dataclass(frozen=True)
class PasswordCheck:
    is_valid: bool
    message: str
    is_strong: bool = False


def validate_password(password: Optional[str]) -> PasswordCheck:
    """
    Check password length and report its strength.

    A password is strong when it contains at least three of: uppercase,
    lowercase, digits, special characters.
    """
    if not password:
        return PasswordCheck(is_valid=False, message="Password is required")

    if len(password) < 6:
        return PasswordCheck(is_valid=False, message="Password must be at least 6 characters")

    classes = (
        re.search(r"[A-Z]", password),
        re.search(r"[a-z]", password),
        re.search(r"\d", password),
        re.search(r"[!@#$%^&*(),.?\":{}|<>]", password),
    )
    if sum(1 for found in classes if found) < 3:
        return PasswordCheck(is_valid=True, message=WEAK_PASSWORD_MESSAGE)

    return PasswordCheck(is_valid=True, message="Strong password", is_strong=True)


def _card_digits(card_number: str) -> str:
    return re.sub(r"[\s-]", "", card_number)


def is_valid_credit_card(card_number: Optional[str]) -> bool:
    """Luhn check; spaces and dashes are ignored."""
    if not card_number:
        return False

    digits = _card_digits(card_number)
    if not re.fullmatch(r"\d+", digits):
        return False

    total = 0
    for index, char in enumerate(reversed(digits)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def get_credit_card_type(card_number: Optional[str]) -> Optional[str]:
    if not card_number:
        return None
    digits = _card_digits(card_number)
    for card_type, pattern in CARD_PATTERNS:
        if pattern.match(digits):
            return card_type
    return None
