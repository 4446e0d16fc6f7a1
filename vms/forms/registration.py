"""Registration and profile forms for volunteers."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from flask_wtf import FlaskForm
from wtforms import (
    BooleanField,
    EmailField,
    PasswordField,
    SelectField,
    SelectMultipleField,
    StringField,
    TelField,
    TextAreaField,
)
from wtforms.widgets import CheckboxInput, ListWidget

from vms.forms.validation import validate_login, validate_profile, validate_registration
from vms.models import AVAILABILITY_LABELS, SKILL_OPTIONS

AVAILABILITY_CHOICES = [("", "Select your availability")] + [
    (availability.value, label) for availability, label in AVAILABILITY_LABELS.items()
]
SKILL_CHOICES = [(skill, skill) for skill in SKILL_OPTIONS]


class MultiCheckboxField(SelectMultipleField):
    widget = ListWidget(prefix_label=False)
    option_widget = CheckboxInput()


class RuleForm(FlaskForm):
    """FlaskForm whose field errors come from a pure validation function.

    WTForms still handles CSRF and coercion; the rules in
    ``vms.forms.validation`` decide the per-field messages so the page and
    the JSON API report identical errors.
    """

    rule_check: Callable[[Mapping[str, Any]], dict[str, str]]

    def record(self) -> dict[str, Any]:
        return {name: field.data for name, field in self._fields.items() if name != "csrf_token"}

    def validate(self, extra_validators=None) -> bool:
        valid = super().validate(extra_validators=extra_validators)
        errors = type(self).rule_check(self.record())
        self.apply_errors(errors)
        return valid and not errors

    def apply_errors(self, errors: Mapping[str, str]) -> None:
        for name, message in errors.items():
            field = self._fields.get(name)
            if field is None:
                continue
            field.errors = list(field.errors or []) + [message]


class RegistrationForm(RuleForm):
    """Form for new volunteer sign-up."""

    rule_check = staticmethod(validate_registration)

    # Personal Information
    full_name = StringField("Full Name", render_kw={"placeholder": "Enter your full name"})
    city = StringField("City", render_kw={"placeholder": "Your city"})

    # Contact Information
    email = EmailField("Email Address", render_kw={"placeholder": "you@example.com"})
    phone = TelField("Mobile Number", render_kw={"placeholder": "+92 300 1234567"})

    # Password
    password = PasswordField("Password", render_kw={"placeholder": "Create a password"})
    confirm_password = PasswordField("Confirm Password", render_kw={"placeholder": "Confirm your password"})

    # Volunteer Preferences
    availability = SelectField("Availability", choices=AVAILABILITY_CHOICES, validate_choice=False)
    skills = MultiCheckboxField("Skills & Interests", choices=SKILL_CHOICES, validate_choice=False)
    bio = TextAreaField(
        "Tell us about yourself (Optional)",
        render_kw={
            "placeholder": "Share your motivation for volunteering, previous experience, or anything else you'd like us to know...",
            "rows": 4,
        },
    )

    agree_to_terms = BooleanField("I agree to the Terms of Service and Privacy Policy")


class ProfileForm(RuleForm):
    """Form for editing an existing volunteer profile."""

    rule_check = staticmethod(validate_profile)

    full_name = StringField("Full Name")
    phone = TelField("Phone")
    city = StringField("City")
    availability = SelectField("Availability", choices=AVAILABILITY_CHOICES, validate_choice=False)
    skills = MultiCheckboxField("Skills & Interests", choices=SKILL_CHOICES, validate_choice=False)
    bio = TextAreaField("Bio", render_kw={"rows": 4})


class LoginForm(RuleForm):
    rule_check = staticmethod(validate_login)

    email = EmailField("Email")
    password = PasswordField("Password")


__all__ = ["LoginForm", "ProfileForm", "RegistrationForm", "RuleForm"]
