"""
Tests for registrations app - form records, generation and legacy storage.
"""
import pytest
from bs4 import BeautifulSoup
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from registrations.admin import RegistrationFormAdmin
from registrations.models import RegistrationForm

BEARER_TOKEN = 'wf_live_0123456789abcdef'
WIDGET_URL = 'https://app.webinarfuel.com/webinars/9/widgets/42/7/elements'

VALID_HTML = """<form accept-charset="UTF-8" action="https://ab123.infusionsoft.com/app/form/process/abc123" method="POST">
  <input name="inf_form_xid" type="hidden" value="abc123" />
  <input name="inf_form_name" type="hidden" value="Webinar Signup" />
  <input id="inf_field_FirstName" name="inf_field_FirstName" type="text" />
  <input id="inf_field_LastName" name="inf_field_LastName" type="text" />
  <input id="inf_field_Email" name="inf_field_Email" type="text" />
  <input id="inf_field_Phone1" name="inf_field_Phone1" type="text" />
  <input id="sms_opt" name="inf_option_smsconsent" type="checkbox" value="1" />
  <button type="submit">Register</button>
</form>"""


@pytest.fixture(autouse=True)
def storage_dirs(settings, tmp_path):
    settings.GENERATED_FORMS_DIR = tmp_path / 'generated'
    settings.LEGACY_DATA_DIR = tmp_path / 'forms-data'
    return tmp_path


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_model():
    return get_user_model()


@pytest.fixture
def create_user(user_model):
    def _create_user(email="test@example.com", password="testpass123", bearer_token=BEARER_TOKEN):
        return user_model.objects.create_user(
            email=email,
            username=email,
            password=password,
            name="Test User",
            bearer_token=bearer_token,
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.fixture
def create_form():
    def _create_form(user, name="Spring Webinar", html=VALID_HTML, **kwargs):
        kwargs.setdefault('widget_id', '42')
        kwargs.setdefault('widget_version', '7')
        kwargs.setdefault('session_id', 'sess-1')
        return RegistrationForm.objects.create(user=user, name=name, infusionsoft_html=html, **kwargs)
    return _create_form


@pytest.mark.django_db
class TestRegistrationFormManagement:

    def test_list_forms(self, authenticated_client, create_form):
        client, user = authenticated_client
        form = create_form(user)

        response = client.get('/api/v1/forms/')
        assert response.status_code == 200
        assert len(response.data['results']) == 1
        assert response.data['results'][0]['name'] == form.name
        assert 'infusionsoft_html' not in response.data['results'][0]

    def test_list_excludes_other_users(self, authenticated_client, create_user, create_form):
        client, user = authenticated_client
        other = create_user(email='other@example.com')
        create_form(other, name='Not Mine')

        response = client.get('/api/v1/forms/')
        assert response.data['results'] == []

    def test_create_form(self, authenticated_client):
        client, user = authenticated_client
        response = client.post('/api/v1/forms/', {
            'name': 'Spring Webinar',
            'infusionsoft_html': VALID_HTML,
            'session_id': 'sess-1',
            'widget_id': '42',
            'widget_version': '7',
        }, format='json')
        assert response.status_code == 201
        form = RegistrationForm.objects.get(id=response.data['id'])
        assert form.user == user
        assert form.status == RegistrationForm.STATUS_DRAFT
        assert form.custom_fields == {}

    def test_widget_url_overrides_ids_on_create(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/forms/', {
            'name': 'Spring Webinar',
            'widget_url': WIDGET_URL,
            'widget_id': '1',
            'widget_version': '1',
        }, format='json')
        assert response.status_code == 201
        assert response.data['widget_id'] == '42'
        assert response.data['widget_version'] == '7'

    def test_stored_widget_url_wins_on_update(self, authenticated_client, create_form):
        client, user = authenticated_client
        form = create_form(user, widget_url=WIDGET_URL)

        response = client.patch(f'/api/v1/forms/{form.id}/', {'widget_id': '99'}, format='json')
        assert response.status_code == 200
        form.refresh_from_db()
        assert form.widget_id == '42'

    def test_clearing_widget_url_allows_explicit_ids(self, authenticated_client, create_form):
        client, user = authenticated_client
        form = create_form(user, widget_url=WIDGET_URL)

        response = client.patch(f'/api/v1/forms/{form.id}/', {
            'widget_url': '',
            'widget_id': '99',
        }, format='json')
        assert response.status_code == 200
        form.refresh_from_db()
        assert form.widget_id == '99'
        assert form.widget_version == '7'

    def test_non_numeric_widget_id(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/forms/', {'name': 'X', 'widget_id': 'abc'}, format='json')
        assert response.status_code == 400
        assert 'widget_id' in response.data

    def test_custom_fields_json_string(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/forms/', {
            'name': 'Spring Webinar',
            'custom_fields': '{"headline": "Join us"}',
        }, format='json')
        assert response.status_code == 201
        form = RegistrationForm.objects.get(id=response.data['id'])
        assert form.custom_fields == {'headline': 'Join us'}

    def test_custom_fields_must_be_object(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/forms/', {
            'name': 'Spring Webinar',
            'custom_fields': '[1, 2]',
        }, format='json')
        assert response.status_code == 400

    def test_retrieve_other_users_form(self, authenticated_client, create_user, create_form):
        client, _ = authenticated_client
        form = create_form(create_user(email='other@example.com'))

        response = client.get(f'/api/v1/forms/{form.id}/')
        assert response.status_code == 404

    def test_delete_form(self, authenticated_client, create_form):
        client, user = authenticated_client
        form = create_form(user)

        response = client.delete(f'/api/v1/forms/{form.id}/')
        assert response.status_code == 204
        assert not RegistrationForm.objects.filter(id=form.id).exists()

    def test_requires_auth(self, api_client):
        response = api_client.get('/api/v1/forms/')
        assert response.status_code == 401


@pytest.mark.django_db
class TestWidgetUrlOnSave:

    def test_apply_widget_url(self):
        form = RegistrationForm(name='X', widget_url=WIDGET_URL, widget_id='1', widget_version='1')
        assert form.apply_widget_url() == ('42', '7')
        assert (form.widget_id, form.widget_version) == ('42', '7')

    def test_apply_widget_url_without_match(self):
        form = RegistrationForm(name='X', widget_url='https://example.com/', widget_id='1', widget_version='2')
        assert form.apply_widget_url() is None
        assert (form.widget_id, form.widget_version) == ('1', '2')

    def test_admin_save_applies_widget_url(self, create_user):
        user = create_user()
        form = RegistrationForm(user=user, name='X', widget_url=WIDGET_URL, widget_id='1', widget_version='1')
        request = RequestFactory().post('/admin/registrations/registrationform/add/')
        request.user = user

        RegistrationFormAdmin(RegistrationForm, admin.site).save_model(request, form, None, False)

        form.refresh_from_db()
        assert (form.widget_id, form.widget_version) == ('42', '7')


@pytest.mark.django_db
class TestValidateEndpoint:

    def test_valid_html(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/generate/validate/', {'infusionsoft_html': VALID_HTML}, format='json')
        assert response.status_code == 200
        assert response.data['is_valid'] is True
        assert response.data['errors'] == []
        assert response.data['fields_found']['consent'] is True

    def test_invalid_html_is_still_200(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/generate/validate/', {'infusionsoft_html': '<p>hi</p>'}, format='json')
        assert response.status_code == 200
        assert response.data['is_valid'] is False
        assert response.data['errors'] == ['No form element found in HTML']
        assert response.data['fields_found'] is None

    def test_missing_html(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/generate/validate/', {}, format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'Infusionsoft HTML is required'

    def test_non_object_body(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/generate/validate/', [], format='json')
        assert response.status_code == 400
        assert response.data['error'] == 'Infusionsoft HTML is required'

    def test_requires_auth(self, api_client):
        response = api_client.post('/api/v1/generate/validate/', {'infusionsoft_html': VALID_HTML}, format='json')
        assert response.status_code == 401


@pytest.mark.django_db
class TestGenerateForm:

    def test_generate_success(self, authenticated_client, create_form, storage_dirs):
        client, user = authenticated_client
        form = create_form(user)

        response = client.post(f'/api/v1/generate/form/{form.id}/')
        assert response.status_code == 200
        filename = response.data['filename']
        assert filename == f"spring-webinar-{str(form.id)[:8]}.html"
        assert response.data['download_url'].endswith(f'/api/v1/generate/form/{filename}')

        path = storage_dirs / 'generated' / filename
        assert path.read_text(encoding='utf-8') == response.data['html']

        tag = BeautifulSoup(response.data['html'], 'html.parser').find('form')
        assert tag['data-wf-session-id'] == 'sess-1'
        assert tag['data-wf-widget-id'] == '42'
        assert tag['data-wf-widget-version'] == '7'
        assert tag['data-wf-widget-name'] == 'Embed'
        assert tag['data-wf-bearer-token'] == BEARER_TOKEN
        assert tag['data-consent-id'] == 'sms_opt'

        form.refresh_from_db()
        assert form.status == RegistrationForm.STATUS_GENERATED
        assert form.generated_filename == filename
        assert form.generated_at is not None

    def test_regenerate_overwrites_artifact(self, authenticated_client, create_form, storage_dirs):
        client, user = authenticated_client
        form = create_form(user)

        first = client.post(f'/api/v1/generate/form/{form.id}/')
        second = client.post(f'/api/v1/generate/form/{form.id}/')
        assert first.data['filename'] == second.data['filename']
        assert len(list((storage_dirs / 'generated').iterdir())) == 1

    def test_missing_bearer_token(self, api_client, create_user, create_form):
        user = create_user(bearer_token=None)
        form = create_form(user)
        api_client.force_authenticate(user=user)

        response = api_client.post(f'/api/v1/generate/form/{form.id}/')
        assert response.status_code == 400
        assert 'Bearer token' in response.data['error']
        form.refresh_from_db()
        assert form.status == RegistrationForm.STATUS_DRAFT

    def test_invalid_html(self, authenticated_client, create_form, storage_dirs):
        client, user = authenticated_client
        form = create_form(user, html='<div>No form here</div>')

        response = client.post(f'/api/v1/generate/form/{form.id}/')
        assert response.status_code == 400
        assert response.data['error'] == 'Form validation failed'
        assert response.data['details'] == ['No form element found in HTML']
        form.refresh_from_db()
        assert form.status == RegistrationForm.STATUS_DRAFT
        assert form.generated_filename is None
        assert not (storage_dirs / 'generated').exists()

    def test_missing_template(self, authenticated_client, create_form, settings, storage_dirs):
        settings.REGISTRATION_TEMPLATE_PATH = storage_dirs / 'missing.html'
        client, user = authenticated_client
        form = create_form(user)

        response = client.post(f'/api/v1/generate/form/{form.id}/')
        assert response.status_code == 500
        assert response.data['error'] == 'Failed to generate form'
        form.refresh_from_db()
        assert form.status == RegistrationForm.STATUS_DRAFT
        assert form.generated_at is None

    def test_longest_name_generates(self, authenticated_client, create_form, storage_dirs):
        client, user = authenticated_client
        form = create_form(user, name='n' * 255)

        response = client.post(f'/api/v1/generate/form/{form.id}/')
        assert response.status_code == 200
        assert (storage_dirs / 'generated' / response.data['filename']).is_file()

    def test_other_users_form(self, authenticated_client, create_user, create_form):
        client, _ = authenticated_client
        form = create_form(create_user(email='other@example.com'))

        response = client.post(f'/api/v1/generate/form/{form.id}/')
        assert response.status_code == 404
        assert response.data['error'] == 'Form not found'


@pytest.mark.django_db
class TestGeneratedFormDownload:

    def test_download_without_auth(self, authenticated_client, create_form):
        client, user = authenticated_client
        form = create_form(user)
        filename = client.post(f'/api/v1/generate/form/{form.id}/').data['filename']

        response = APIClient().get(f'/api/v1/generate/form/{filename}')
        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/html')
        body = b''.join(response.streaming_content).decode('utf-8')
        assert 'data-wf-widget-id="42"' in body

    def test_unknown_file(self, api_client):
        response = api_client.get('/api/v1/generate/form/nothing-here-00000000.html')
        assert response.status_code == 404
        assert response.data['error'] == 'Generated form not found'

    def test_rejects_names_outside_store(self, api_client, storage_dirs):
        (storage_dirs / 'generated').mkdir()
        (storage_dirs / 'generated' / 'Notes.HTML').write_text('secret')

        response = api_client.get('/api/v1/generate/form/Notes.HTML')
        assert response.status_code == 404


@pytest.mark.django_db
class TestLegacyStorage:

    def test_empty_documents(self, authenticated_client):
        client, _ = authenticated_client
        assert client.get('/api/v1/legacy/forms/').data == {}
        assert client.get('/api/v1/legacy/settings/').data == {}

    def test_save_and_load(self, authenticated_client, storage_dirs):
        client, _ = authenticated_client
        document = {'f1': {'name': 'Spring Webinar', 'widgetId': '42'}}

        response = client.post('/api/v1/legacy/forms/', document, format='json')
        assert response.status_code == 200
        assert response.data == {'success': True}
        assert client.get('/api/v1/legacy/forms/').data == document
        assert (storage_dirs / 'forms-data' / 'forms.json').is_file()

    def test_save_replaces_document(self, authenticated_client):
        client, _ = authenticated_client
        client.post('/api/v1/legacy/settings/', {'bearerToken': 'a', 'theme': 'dark'}, format='json')
        client.post('/api/v1/legacy/settings/', {'bearerToken': 'b'}, format='json')
        assert client.get('/api/v1/legacy/settings/').data == {'bearerToken': 'b'}

    def test_rejects_scalar_body(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/legacy/forms/', 'just text', format='json')
        assert response.status_code == 400

    def test_corrupt_document(self, authenticated_client, storage_dirs):
        client, _ = authenticated_client
        (storage_dirs / 'forms-data').mkdir()
        (storage_dirs / 'forms-data' / 'forms.json').write_text('{not json')

        response = client.get('/api/v1/legacy/forms/')
        assert response.status_code == 500

    def test_requires_auth(self, api_client):
        response = api_client.get('/api/v1/legacy/forms/')
        assert response.status_code == 401


@pytest.mark.django_db
def test_health_check(api_client):
    response = api_client.get('/api/v1/health/')
    assert response.status_code == 200
    assert response.json()['status'] == 'ok'
