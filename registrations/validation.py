"""
Structural validation of pasted Infusionsoft form HTML.

Checks run in a fixed order so errors and warnings come back in discovery
order: form element, action URL, required inputs, then the optional inputs
(consent checkbox, first/last name, phone).
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

INFUSIONSOFT_DOMAIN = 'infusionsoft.com'

EMAIL_FIELD = 'inf_field_Email'
FIRST_NAME_FIELD = 'inf_field_FirstName'
LAST_NAME_FIELD = 'inf_field_LastName'
PHONE_FIELD = 'inf_field_Phone1'

REQUIRED_FIELDS = [
    (EMAIL_FIELD, 'Email field'),
    ('inf_form_xid', 'Form XID'),
    ('inf_form_name', 'Form name'),
]

# Case-sensitive substrings of a checkbox ``name`` that mark it as consent
CONSENT_NAME_MARKERS = ('consent', 'sms', 'opt')

# HTML attribute values for ``type`` are case-insensitive
CHECKBOX_TYPE = re.compile(r'^checkbox$', re.IGNORECASE)

NO_FORM_ERROR = 'No form element found in HTML'
ACTION_URL_ERROR = 'Invalid or missing Infusionsoft action URL'
NO_CONSENT_WARNING = (
    'No SMS consent checkbox found. '
    'Users will not be able to opt-in for SMS notifications.'
)


@dataclass
class ValidationResult:
    """Outcome of :func:`validate`. ``fields_found`` is None when no form exists."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    fields_found: Optional[Dict[str, bool]] = None

    def to_dict(self):
        return {
            'is_valid': self.is_valid,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
            'fields_found': dict(self.fields_found) if self.fields_found is not None else None,
        }


def parse_html(html):
    """Best-effort parse; malformed markup never raises."""
    return BeautifulSoup(html or '', 'html.parser')


def find_input(soup, name):
    return soup.find('input', attrs={'name': name})


def find_checkboxes(soup):
    return soup.find_all('input', attrs={'type': CHECKBOX_TYPE})


def find_consent_checkbox(soup):
    """First checkbox whose name contains one of the consent markers."""
    for checkbox in find_checkboxes(soup):
        name = checkbox.get('name') or ''
        if any(marker in name for marker in CONSENT_NAME_MARKERS):
            return checkbox
    return None


def validate(html):
    """
    Validate Infusionsoft form HTML.

    Errors block generation; warnings are informational only.
    """
    soup = parse_html(html)
    errors = []
    warnings = []

    form = soup.find('form')
    if form is None:
        return ValidationResult(is_valid=False, errors=[NO_FORM_ERROR])

    action = form.get('action')
    if not action or INFUSIONSOFT_DOMAIN not in action:
        errors.append(ACTION_URL_ERROR)

    for name, label in REQUIRED_FIELDS:
        if find_input(soup, name) is None:
            errors.append(f'Missing required field: {label}')

    has_consent = find_consent_checkbox(soup) is not None
    if not has_consent:
        warnings.append(NO_CONSENT_WARNING)

    has_first_name = find_input(soup, FIRST_NAME_FIELD) is not None
    has_last_name = find_input(soup, LAST_NAME_FIELD) is not None
    if not has_first_name:
        warnings.append('First name field not found')
    if not has_last_name:
        warnings.append('Last name field not found')

    has_phone = find_input(soup, PHONE_FIELD) is not None
    if not has_phone:
        warnings.append('Phone field not found')

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        fields_found={
            'email': find_input(soup, EMAIL_FIELD) is not None,
            'first_name': has_first_name,
            'last_name': has_last_name,
            'phone': has_phone,
            'consent': has_consent,
        },
    )
