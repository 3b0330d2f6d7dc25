import re
from dataclasses import dataclass
from datetime import date

from cineconnect.utils.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EXPIRY_RE = re.compile(r"^(\d{2})/(\d{2})$")
CVV_RE = re.compile(r"^\d{3,4}$")


@dataclass(frozen=True)
class PaymentForm:
    card_name: str = ""
    card_number: str = ""
    expiry: str = ""
    cvv: str = ""
    email: str = ""

    @classmethod
    def from_request(cls, form, default_email=""):
        return cls(
            card_name=(form.get("card_name") or "").strip(),
            card_number=format_card_number(form.get("card_number") or "", max_digits=None),
            expiry=format_expiry(form.get("expiry") or "", max_digits=None),
            cvv=(form.get("cvv") or "").strip(),
            email=(form.get("email") or default_email or "").strip(),
        )

    def remembered(self):
        """Fields safe to keep in the session cookie (no card number, no CVV)."""
        return {"card_name": self.card_name, "expiry": self.expiry, "email": self.email}


def format_card_number(value, max_digits=16):
    """Group the digits of ``value`` in fours.

    ``max_digits=None`` keeps every digit so that a number that is too long
    still fails validation instead of being cut down to a valid length.
    """
    digits = re.sub(r"\D", "", value or "")[:max_digits]
    return " ".join(digits[i:i + 4] for i in range(0, len(digits), 4))


def format_expiry(value, max_digits=4):
    digits = re.sub(r"\D", "", value or "")[:max_digits]
    if len(digits) > 2:
        return f"{digits[:2]}/{digits[2:]}"
    return digits


def validate_card_number(card_number):
    number = re.sub(r"\s+", "", card_number or "")
    if not re.fullmatch(r"\d{16}", number):
        raise ValidationError("The card number must have 16 digits.")


def validate_expiry(expiry, today=None):
    today = today or date.today()
    match = EXPIRY_RE.match(expiry or "")
    if not match:
        raise ValidationError("The expiry date must be in MM/YY format.")
    month, year = int(match.group(1)), 2000 + int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError("Invalid expiry month.")
    if (year, month) < (today.year, today.month):
        raise ValidationError("The card has expired.")


def validate_cvv(cvv):
    if not CVV_RE.match(cvv or ""):
        raise ValidationError("The CVV must have 3 or 4 digits.")


def validate_email(email):
    if not email:
        raise ValidationError("An email address is required to send the tickets.")
    if not EMAIL_RE.match(email):
        raise ValidationError("The email address is not valid.")


def validate_payment_form(form, today=None, fallback_email=""):
    """Return the first problem with ``form`` as a message, or None when it passes.

    These checks only spare the user a round trip; the booking service decides.
    """
    try:
        if not form.card_name:
            raise ValidationError("Enter the name on the card.")
        validate_card_number(form.card_number)
        validate_expiry(form.expiry, today)
        validate_cvv(form.cvv)
        validate_email(form.email or fallback_email)
    except ValidationError as e:
        return e.message
    return None
