"""
Tests for the HTML validator, widget URL parser, form merger and file stores.
"""
import json
from datetime import datetime, timezone as dt_timezone

import pytest
from bs4 import BeautifulSoup

from registrations.artifacts import ArtifactStore, artifact_filename
from registrations.generator import (
    BEARER_TOKEN_ATTR,
    CONSENT_ID_ATTR,
    SESSION_ID_ATTR,
    WIDGET_ID_ATTR,
    WIDGET_NAME_ATTR,
    WIDGET_VERSION_ATTR,
    TemplateUnavailable,
    format_timestamp,
    generate,
    merge_form,
)
from registrations.legacy_store import JSONDocumentStore, LegacyStoreError
from registrations.validation import (
    ACTION_URL_ERROR,
    NO_CONSENT_WARNING,
    NO_FORM_ERROR,
    validate,
)
from registrations.widget_url import WidgetRef, parse_widget_url

VALID_HTML = """
<form accept-charset="UTF-8" action="https://ab123.infusionsoft.com/app/form/process/abc123" class="infusion-form" id="inf_form_abc123" method="POST">
  <input name="inf_form_xid" type="hidden" value="abc123" />
  <input name="inf_form_name" type="hidden" value="Webinar Signup" />
  <label for="inf_field_FirstName">First Name</label>
  <input id="inf_field_FirstName" name="inf_field_FirstName" type="text" />
  <input id="inf_field_LastName" name="inf_field_LastName" type="text" />
  <input id="inf_field_Email" name="inf_field_Email" type="text" />
  <input id="inf_field_Phone1" name="inf_field_Phone1" type="text" />
  <input id="sms_opt" name="inf_option_smsconsent" type="checkbox" value="1" />
  <button type="submit">Register now</button>
</form>
"""

MINIMAL_HTML = """
<form action="https://ab123.infusionsoft.com/app/form/process/abc123">
  <input name="inf_form_xid" type="hidden" value="abc123" />
  <input name="inf_form_name" type="hidden" value="Webinar Signup" />
  <input name="inf_field_Email" type="text" />
</form>
"""

NOW = datetime(2026, 3, 4, 5, 6, 7, 891000, tzinfo=dt_timezone.utc)


def form_tag(html):
    return BeautifulSoup(html, 'html.parser').find('form')


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / 'template.html'
    path.write_text(
        '<!-- {{TIMESTAMP}} --><main>{{FORM_HTML}}</main>'
        '<footer>{{FORM_HTML}} {{TIMESTAMP}}</footer>',
        encoding='utf-8',
    )
    return path


class TestValidate:

    def test_no_form_element(self):
        result = validate('<div><input name="inf_field_Email"></div>')
        assert result.is_valid is False
        assert result.errors == [NO_FORM_ERROR]
        assert result.warnings == []
        assert result.fields_found is None

    def test_empty_input(self):
        result = validate('')
        assert result.errors == [NO_FORM_ERROR]
        assert result.warnings == []

    def test_complete_form_is_valid_without_warnings(self):
        result = validate(VALID_HTML)
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.fields_found == {
            'email': True,
            'first_name': True,
            'last_name': True,
            'phone': True,
            'consent': True,
        }

    def test_action_without_infusionsoft_domain(self):
        html = VALID_HTML.replace('ab123.infusionsoft.com', 'forms.example.com')
        result = validate(html)
        assert result.is_valid is False
        assert result.errors == [ACTION_URL_ERROR]

    def test_missing_action_attribute(self):
        result = validate('<form><input name="inf_field_Email"></form>')
        assert result.errors[0] == ACTION_URL_ERROR
        assert result.errors[1:] == [
            'Missing required field: Form XID',
            'Missing required field: Form name',
        ]

    def test_required_fields_reported_in_order(self):
        result = validate('<form action="https://x.infusionsoft.com/p"></form>')
        assert result.errors == [
            'Missing required field: Email field',
            'Missing required field: Form XID',
            'Missing required field: Form name',
        ]
        assert result.fields_found['email'] is False

    def test_required_field_match_is_case_sensitive(self):
        html = MINIMAL_HTML.replace('inf_field_Email', 'inf_field_email')
        result = validate(html)
        assert result.errors == ['Missing required field: Email field']

    def test_optional_fields_are_warnings_only(self):
        result = validate(MINIMAL_HTML)
        assert result.is_valid is True
        assert result.warnings == [
            NO_CONSENT_WARNING,
            'First name field not found',
            'Last name field not found',
            'Phone field not found',
        ]
        assert result.fields_found == {
            'email': True,
            'first_name': False,
            'last_name': False,
            'phone': False,
            'consent': False,
        }

    @pytest.mark.parametrize('name', ['gdpr_consent', 'sms_ok', 'optin'])
    def test_consent_checkbox_name_markers(self, name):
        html = MINIMAL_HTML.replace('</form>', f'<input type="checkbox" name="{name}"></form>')
        result = validate(html)
        assert result.fields_found['consent'] is True
        assert NO_CONSENT_WARNING not in result.warnings

    def test_consent_markers_are_case_sensitive(self):
        html = MINIMAL_HTML.replace('</form>', '<input type="checkbox" name="SMS_Consent"></form>')
        result = validate(html)
        assert result.fields_found['consent'] is False

    def test_checkbox_type_is_case_insensitive(self):
        html = VALID_HTML.replace('type="checkbox"', 'type="Checkbox"')
        result = validate(html)
        assert result.fields_found['consent'] is True
        assert result.warnings == []

    def test_consent_requires_checkbox_type(self):
        html = MINIMAL_HTML.replace('</form>', '<input type="text" name="sms_consent"></form>')
        result = validate(html)
        assert result.fields_found['consent'] is False

    def test_malformed_markup_does_not_raise(self):
        html = '<form action="https://x.infusionsoft.com"><input name="inf_field_Email" <div></span>'
        result = validate(html)
        assert NO_FORM_ERROR not in result.errors

    def test_validate_is_idempotent(self):
        assert validate(VALID_HTML).to_dict() == validate(VALID_HTML).to_dict()
        assert validate(MINIMAL_HTML).to_dict() == validate(MINIMAL_HTML).to_dict()


class TestParseWidgetUrl:

    def test_matches_widget_path(self):
        url = 'https://app.webinarfuel.com/webinars/9/widgets/42/7/elements'
        assert parse_widget_url(url) == WidgetRef(widget_id='42', version='7')

    def test_preserves_leading_zeros(self):
        ref = parse_widget_url('https://app.webinarfuel.com/widgets/0042/007/elements?tab=1')
        assert ref.widget_id == '0042'
        assert ref.version == '007'

    def test_single_segment_does_not_match(self):
        assert parse_widget_url('https://app.webinarfuel.com/widgets/42/elements') is None

    @pytest.mark.parametrize('value', ['', None, 'not a url', '/widgets/a/b/elements', 12345])
    def test_no_match(self, value):
        assert parse_widget_url(value) is None


class TestMergeForm:

    def test_sets_all_six_attributes(self):
        output = generate(VALID_HTML, 'S1', '42', '7', 'T', now=NOW)
        form = form_tag(output)
        assert form[SESSION_ID_ATTR] == 'S1'
        assert form[WIDGET_ID_ATTR] == '42'
        assert form[WIDGET_VERSION_ATTR] == '7'
        assert form[WIDGET_NAME_ATTR] == 'Embed'
        assert form[BEARER_TOKEN_ATTR] == 'T'
        assert form[CONSENT_ID_ATTR] == 'sms_opt'

    def test_keeps_existing_attributes_and_content(self):
        form = form_tag(merge_form(VALID_HTML, 'S1', '42', '7', 'T'))
        assert form['action'] == 'https://ab123.infusionsoft.com/app/form/process/abc123'
        assert form['method'] == 'POST'
        assert form['id'] == 'inf_form_abc123'
        assert form.find('button').get_text() == 'Register now'
        assert form.find('label').get_text() == 'First Name'

    def test_overwrites_existing_embed_attribute(self):
        html = VALID_HTML.replace('method="POST"', 'method="POST" data-wf-widget-id="1"')
        form = form_tag(merge_form(html, 'S1', '42', '7', 'T'))
        assert form[WIDGET_ID_ATTR] == '42'

    def test_consent_uses_last_checkbox(self):
        html = VALID_HTML.replace(
            '<button',
            '<input type="checkbox" id="terms" name="accept_terms" /><button',
        )
        form = form_tag(merge_form(html, 'S1', '42', '7', 'T'))
        assert form[CONSENT_ID_ATTR] == 'terms'

    def test_consent_falls_back_to_name(self):
        html = VALID_HTML.replace('id="sms_opt" ', '')
        form = form_tag(merge_form(html, 'S1', '42', '7', 'T'))
        assert form[CONSENT_ID_ATTR] == 'inf_option_smsconsent'

    def test_checkbox_without_id_or_name(self):
        html = VALID_HTML.replace('id="sms_opt" name="inf_option_smsconsent" ', '')
        form = form_tag(merge_form(html, 'S1', '42', '7', 'T'))
        assert CONSENT_ID_ATTR not in form.attrs
        for attr in (SESSION_ID_ATTR, WIDGET_ID_ATTR, WIDGET_VERSION_ATTR, WIDGET_NAME_ATTR, BEARER_TOKEN_ATTR):
            assert attr in form.attrs

    def test_consent_checkbox_type_is_case_insensitive(self):
        html = VALID_HTML.replace('type="checkbox"', 'type="CHECKBOX"')
        form = form_tag(merge_form(html, 'S1', '42', '7', 'T'))
        assert form[CONSENT_ID_ATTR] == 'sms_opt'

    def test_no_checkboxes(self):
        form = form_tag(merge_form(MINIMAL_HTML, 'S1', '42', '7', 'T'))
        assert CONSENT_ID_ATTR not in form.attrs
        assert form[SESSION_ID_ATTR] == 'S1'

    def test_missing_form_does_not_crash(self):
        output = merge_form('<div>no form here</div>', 'S1', '42', '7', 'T')
        assert 'no form here' in output
        assert SESSION_ID_ATTR not in output


class TestGenerate:

    def test_template_substitution(self, template_file):
        output = generate(MINIMAL_HTML.strip(), 'S1', '42', '7', 'T', now=NOW, template_path=template_file)
        stamp = '2026-03-04T05:06:07.891Z'
        assert output.startswith(f'<!-- {stamp} --><main><form')
        # only the first form placeholder is replaced
        assert '<footer>{{FORM_HTML}} ' + stamp + '</footer>' in output
        assert '{{TIMESTAMP}}' not in output
        assert output.count('<form') == 1

    def test_default_template_is_used(self):
        output = generate(VALID_HTML, 'S1', '42', '7', 'T', now=NOW)
        assert output.lstrip().startswith('<!DOCTYPE html>')
        assert '{{FORM_HTML}}' not in output
        assert '{{TIMESTAMP}}' not in output
        assert format_timestamp(NOW) in output

    def test_regeneration_differs_only_in_timestamp(self):
        later = datetime(2026, 3, 5, 0, 0, 0, tzinfo=dt_timezone.utc)
        first = generate(VALID_HTML, 'S1', '42', '7', 'T', now=NOW)
        second = generate(VALID_HTML, 'S1', '42', '7', 'T', now=later)
        assert first != second
        assert first.replace(format_timestamp(NOW), 'TS') == second.replace(format_timestamp(later), 'TS')

    def test_missing_template(self, tmp_path):
        with pytest.raises(TemplateUnavailable):
            generate(VALID_HTML, 'S1', '42', '7', 'T', template_path=tmp_path / 'missing.html')

    def test_timestamp_format(self):
        assert format_timestamp(NOW) == '2026-03-04T05:06:07.891Z'
        parsed = datetime.fromisoformat(format_timestamp(NOW).replace('Z', '+00:00'))
        assert parsed == NOW


class TestArtifactStore:

    def test_filename_from_name_and_id(self):
        name = artifact_filename('My Webinar: Spring!', '3f2a9c1e-1111-2222-3333-444455556666')
        assert name == 'my-webinar--spring--3f2a9c1e.html'

    def test_long_name_is_truncated(self, tmp_path):
        name = artifact_filename('n' * 255, '3f2a9c1e-1111-2222-3333-444455556666')
        assert name == 'n' * 200 + '-3f2a9c1e.html'
        assert ArtifactStore(tmp_path).write(name, '<html></html>').is_file()

    def test_write_and_exists(self, tmp_path):
        store = ArtifactStore(tmp_path / 'generated')
        path = store.write('form-3f2a9c1e.html', '<html></html>')
        assert path.read_text(encoding='utf-8') == '<html></html>'
        assert store.exists('form-3f2a9c1e.html')

    @pytest.mark.parametrize('filename', ['../secret.html', 'a/b.html', 'Form.html', 'form.txt', ''])
    def test_rejects_foreign_names(self, tmp_path, filename):
        store = ArtifactStore(tmp_path)
        assert store.path_for(filename) is None
        assert not store.exists(filename)


class TestJSONDocumentStore:

    def test_missing_document_reads_empty(self, tmp_path):
        assert JSONDocumentStore(tmp_path).read('forms') == {}

    def test_write_replaces_whole_document(self, tmp_path):
        store = JSONDocumentStore(tmp_path)
        store.write('forms', {'a': {'name': 'First'}, 'b': {'name': 'Second'}})
        store.write('forms', {'c': {'name': 'Third'}})
        assert store.read('forms') == {'c': {'name': 'Third'}}
        assert json.loads((tmp_path / 'forms.json').read_text()) == {'c': {'name': 'Third'}}

    def test_failed_write_keeps_previous_document(self, tmp_path):
        store = JSONDocumentStore(tmp_path)
        store.write('settings', {'bearer_token': 'abc'})
        with pytest.raises(LegacyStoreError):
            store.write('settings', {'bad': object()})
        assert store.read('settings') == {'bearer_token': 'abc'}
        assert [p.name for p in tmp_path.iterdir()] == ['settings.json']

    def test_unknown_document(self, tmp_path):
        with pytest.raises(LegacyStoreError):
            JSONDocumentStore(tmp_path).read('users')
