"""
Registration form generator.

Takes validated Infusionsoft form HTML, annotates the ``<form>`` element with
the WebinarFuel embed attributes and drops the result into the static
registration page template.

Callers must run :func:`registrations.validation.validate` first; this module
does no validation of its own.
"""
import logging
from datetime import timezone as dt_timezone
from pathlib import Path

from django.conf import settings
from django.utils import timezone

from .validation import find_checkboxes, parse_html

logger = logging.getLogger(__name__)

SESSION_ID_ATTR = 'data-wf-session-id'
WIDGET_ID_ATTR = 'data-wf-widget-id'
WIDGET_VERSION_ATTR = 'data-wf-widget-version'
WIDGET_NAME_ATTR = 'data-wf-widget-name'
BEARER_TOKEN_ATTR = 'data-wf-bearer-token'
CONSENT_ID_ATTR = 'data-consent-id'

WIDGET_NAME = 'Embed'

FORM_PLACEHOLDER = '{{FORM_HTML}}'
TIMESTAMP_PLACEHOLDER = '{{TIMESTAMP}}'


class GenerationError(Exception):
    """Raised when a registration form cannot be produced."""


class TemplateUnavailable(GenerationError):
    """The registration page template could not be read."""

    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"Registration template unavailable at {path}: {reason}")


def format_timestamp(moment):
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(dt_timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def load_template(path=None):
    path = Path(path or settings.REGISTRATION_TEMPLATE_PATH)
    try:
        return path.read_text(encoding='utf-8')
    except OSError as e:
        raise TemplateUnavailable(path, e) from e


def consent_id_for(checkbox):
    """``id`` of the checkbox, falling back to ``name``; None when neither is set."""
    return checkbox.get('id') or checkbox.get('name') or None


def embed_attributes(session_id, widget_id, widget_version, bearer_token):
    return {
        SESSION_ID_ATTR: _attr_value(session_id),
        WIDGET_ID_ATTR: _attr_value(widget_id),
        WIDGET_VERSION_ATTR: _attr_value(widget_version),
        WIDGET_NAME_ATTR: WIDGET_NAME,
        BEARER_TOKEN_ATTR: _attr_value(bearer_token),
    }


def _attr_value(value):
    return '' if value is None else str(value)


def merge_form(source_html, session_id, widget_id, widget_version, bearer_token):
    """
    Return ``source_html`` with the embed attributes set on its first form.

    The consent id comes from the last checkbox in the document, which is a
    looser rule than the consent check in validation.
    """
    soup = parse_html(source_html)
    form = soup.find('form')
    if form is None:
        logger.warning("merge_form called without a <form> element; returning markup unchanged")
        return str(soup)

    attrs = {**form.attrs, **embed_attributes(session_id, widget_id, widget_version, bearer_token)}

    checkboxes = find_checkboxes(soup)
    if checkboxes:
        consent_id = consent_id_for(checkboxes[-1])
        if consent_id:
            attrs[CONSENT_ID_ATTR] = consent_id

    form.attrs = attrs
    return str(soup)


def render_page(template, form_html, generated_at):
    page = template.replace(TIMESTAMP_PLACEHOLDER, format_timestamp(generated_at))
    return page.replace(FORM_PLACEHOLDER, form_html, 1)


def generate(source_html, session_id, widget_id, widget_version, bearer_token,
             now=None, template_path=None):
    """
    Build the complete registration page.

    Raises TemplateUnavailable if the page template cannot be loaded.
    """
    template = load_template(template_path)
    form_html = merge_form(source_html, session_id, widget_id, widget_version, bearer_token)
    return render_page(template, form_html, now or timezone.now())
