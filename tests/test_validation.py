"""Field rules and form schemas."""

import pytest

from vms.forms.validation import (
    email_address,
    min_length,
    optional,
    max_length,
    validate,
    validate_login,
    validate_profile,
    validate_registration,
)


def valid_registration(**overrides):
    record = {
        'full_name': 'Amina Khan',
        'email': 'amina@example.com',
        'phone': '0300 1234567',
        'city': 'Karachi',
        'password': 'secret123',
        'confirm_password': 'secret123',
        'availability': 'weekends',
        'skills': ['Healthcare'],
        'bio': '',
        'agree_to_terms': True,
    }
    record.update(overrides)
    return record


class TestRules:
    def test_first_failing_rule_decides_message(self):
        schema = {'name': [min_length(2, 'too short'), max_length(3, 'too long')]}
        assert validate({'name': 'a'}, schema) == {'name': 'too short'}
        assert validate({'name': 'abcd'}, schema) == {'name': 'too long'}
        assert validate({'name': 'abc'}, schema) == {}

    def test_missing_field_is_treated_as_empty(self):
        schema = {'name': [min_length(2, 'too short')]}
        assert validate({}, schema) == {'name': 'too short'}

    def test_optional_skips_blank_values(self):
        rule = optional(max_length(3, 'too long'))
        assert rule('') is None
        assert rule(None) is None
        assert rule('abcd') == 'too long'

    @pytest.mark.parametrize('value', ['a@b.co', 'first.last@example.org'])
    def test_email_accepts_addresses(self, value):
        assert email_address('bad')(value) is None

    @pytest.mark.parametrize('value', [
        '', 'plain', 'a@b', 'a b@c.com', '@example.com',
        'john..doe@example.com', 'a@-example.com', 'a@example..com', '.a@example.com',
    ])
    def test_email_rejects_malformed(self, value):
        assert email_address('bad')(value) == 'bad'


class TestRegistration:
    def test_valid_record_passes(self):
        assert validate_registration(valid_registration()) == {}

    def test_short_name(self):
        errors = validate_registration(valid_registration(full_name='A'))
        assert errors['full_name'] == 'Name must be at least 2 characters'

    def test_phone_too_short_and_bad_format(self):
        assert validate_registration(valid_registration(phone='12345'))['phone'] == \
            'Phone number must be at least 10 digits'
        assert validate_registration(valid_registration(phone='0300-ABC-4567'))['phone'] == \
            'Invalid phone number format'

    def test_password_rules(self):
        assert validate_registration(valid_registration(password='abc1', confirm_password='abc1'))['password'] == \
            'Password must be at least 8 characters'
        assert validate_registration(valid_registration(password='12345678', confirm_password='12345678'))['password'] == \
            'Password must contain at least one letter'
        assert validate_registration(valid_registration(password='abcdefgh', confirm_password='abcdefgh'))['password'] == \
            'Password must contain at least one number'

    def test_preferences_and_terms(self):
        errors = validate_registration(valid_registration(availability='', skills=[], agree_to_terms=False))
        assert errors['availability'] == 'Please select your availability'
        assert errors['skills'] == 'Please select at least one skill'
        assert errors['agree_to_terms'] == 'You must agree to the terms'

    def test_password_needs_ascii_digit(self):
        record = valid_registration(password='abcdefg\u0663', confirm_password='abcdefg\u0663')
        assert validate_registration(record)['password'] == 'Password must contain at least one number'

    def test_malformed_email_blocks_registration(self):
        errors = validate_registration(valid_registration(email='john..doe@example.com'))
        assert errors == {'email': 'Invalid email address'}

    def test_bio_limit(self):
        errors = validate_registration(valid_registration(bio='x' * 501))
        assert errors == {'bio': 'Bio must be less than 500 characters'}

    def test_password_mismatch_reported_on_confirm_field(self):
        errors = validate_registration(valid_registration(confirm_password='secret124'))
        assert errors == {'confirm_password': 'Passwords do not match'}

    def test_mismatch_only_checked_after_field_rules_pass(self):
        errors = validate_registration(valid_registration(full_name='A', confirm_password='other'))
        assert 'confirm_password' not in errors
        assert 'full_name' in errors


class TestProfileAndLogin:
    def test_profile_allows_blank_optional_fields(self):
        record = {
            'full_name': 'Amina Khan',
            'phone': '03001234567',
            'city': '',
            'availability': '',
            'skills': [],
            'bio': '',
        }
        assert validate_profile(record) == {}

    def test_profile_requires_name_and_phone(self):
        errors = validate_profile({'full_name': '', 'phone': ''})
        assert errors['full_name'] == 'Name must be at least 2 characters'
        assert errors['phone'] == 'Phone number must be at least 10 digits'

    def test_profile_phone_rejects_non_ascii_digits(self):
        errors = validate_profile({'full_name': 'Amina', 'phone': '\u0660\u0663\u0660\u0660\u0661\u0662\u0663\u0664\u0665\u0666\u0667'})
        assert errors == {'phone': 'Invalid phone number format'}

    def test_login_rejects_malformed_email(self):
        assert validate_login({'email': 'not-an-email', 'password': 'x'}) == {'email': 'Invalid email address'}

    def test_login_requires_password(self):
        assert validate_login({'email': 'a@b.co', 'password': ''}) == {'password': 'Password is required'}
