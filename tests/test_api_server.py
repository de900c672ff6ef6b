"""
Tests for the FastAPI endpoints
"""

import pdfplumber
import pytest
from fastapi.testclient import TestClient

from api.api_server import app
from parsers.flight_board_parser import FLIGHT_BOARD_FORMAT_EXAMPLE
from parsers.roster_parser import ROSTER_FORMAT_EXAMPLE


@pytest.fixture
def client():
    return TestClient(app)


def flight_duty(day, report, off, dep, arr, flight_number='OS377'):
    return {
        'date': day,
        'type': 'FLIGHT',
        'report_time': report,
        'off_duty_time': off,
        'flights': [{
            'flight_number': flight_number,
            'departure': 'VIE',
            'arrival': 'AMS',
            'departure_time': dep,
            'arrival_time': arr,
        }],
    }


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.json()['status'] == 'ok'

    def test_health(self, client):
        body = client.get('/api/health').json()
        assert body['status'] == 'OK'
        assert 'timestamp' in body

    def test_ftl_limits(self, client):
        body = client.get('/api/ftl-limits', params={'language': 'lv'}).json()
        assert body['language'] == 'lv'
        assert body['limits']['min_rest'] == {'standard': 10.0, 'extended': 12.0}
        assert body['limits']['max_fdp']['1']['06:00-17:59'] == 13.0


class TestCheckCompliance:

    def test_legal_and_illegal_days(self, client):
        payload = {'flight_data': [
            flight_duty('2025-06-09', '08:00', '20:00', '09:00', '11:00'),
            flight_duty('2025-06-10', '05:00', '10:00', '06:00', '08:00', 'OS379'),
        ]}
        response = client.post('/api/check-compliance', json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body['success']
        assert body['summary'] == {
            'total_days': 2, 'legal_days': 1, 'warning_days': 0, 'illegal_days': 1,
        }
        first, second = body['compliance_results']
        assert first['status'] == 'LEGAL'
        assert first['calculations']['fdp'] == '12:00'
        assert second['status'] == 'ILLEGAL'
        assert 'REST_INSUFFICIENT' in [issue['type'] for issue in second['issues']]
        assert second['calculations']['rest'] == '09:00'

    def test_status_label_follows_language(self, client):
        payload = {
            'flight_data': [flight_duty('2025-06-09', '08:00', '16:00', '09:00', '11:00')],
            'language': 'ru',
        }
        result = client.post('/api/check-compliance', json=payload).json()['compliance_results'][0]
        assert result['status'] == 'LEGAL'
        assert result['status_label'] == 'ЗАКОННО'

    def test_invalid_payload(self, client):
        response = client.post('/api/check-compliance', json={'flight_data': 'not a list'})

        assert response.status_code == 400
        detail = response.json()['detail']
        assert detail['error'] == 'Invalid flight data'
        assert detail['details'] == ['Flight data must be an array']

    def test_missing_payload(self, client):
        response = client.post('/api/check-compliance', json={})
        assert response.status_code == 400


class TestParseRoster:

    def test_line_structured(self, client):
        response = client.post('/api/parse-roster', json={'roster_text': ROSTER_FORMAT_EXAMPLE})

        assert response.status_code == 200
        body = response.json()
        assert body['parser_used'] == 'line_structured'
        assert len(body['duty_periods']) == 2
        assert body['timezone_info']['conversion_applied'] is False
        assert body['message'] == (
            'Successfully parsed 2 duty periods with 7 flights using line_structured parser'
        )

    def test_parse_failure_returns_example(self, client):
        response = client.post('/api/parse-roster', json={'roster_text': 'Mon09 C/I VIE 0900'})

        assert response.status_code == 400
        detail = response.json()['detail']
        assert detail['error'] == 'Failed to parse roster text'
        assert detail['parser_used'] == 'line_structured'
        assert detail['example'] == ROSTER_FORMAT_EXAMPLE
        assert 'Duty 1: No flights found' in detail['details']

    def test_missing_text(self, client):
        response = client.post('/api/parse-roster', json={})
        assert response.status_code == 400
        assert response.json()['detail']['error'] == 'Invalid roster text'


class TestParseRosterPdf:

    def test_rejects_non_pdf(self, client):
        response = client.post(
            '/api/parse-roster-pdf',
            files={'file': ('roster.txt', b'hello', 'text/plain')},
        )
        assert response.status_code == 400
        assert response.json()['detail']['error'] == 'Invalid PDF file'

    def test_pdf_upload(self, client, monkeypatch):
        class FakePage:
            def extract_text(self):
                return "Sat07 C/I VIE 1200\nOS 655 VIE 1314 1454 RMO A220\nC/O 2039 AMS [FT 05:13]"

        class FakePdf:
            pages = [FakePage()]

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr(pdfplumber, 'open', lambda handle: FakePdf())
        response = client.post(
            '/api/parse-roster-pdf',
            files={'file': ('roster.pdf', b'%PDF-1.4 roster', 'application/pdf')},
            data={'is_utc': 'false'},
        )

        assert response.status_code == 200
        body = response.json()
        assert body['parser_used'] == 'line_structured'
        assert body['duty_periods'][0]['report_time'] == '12:00'
        assert body['message'] == 'Successfully parsed 1 duty periods from roster.pdf'


class TestFlightBoardEndpoints:

    def test_parse_flight_data(self, client):
        response = client.post('/api/parse-flight-data', json={'flight_text': FLIGHT_BOARD_FORMAT_EXAMPLE})

        assert response.status_code == 200
        body = response.json()
        assert [f['flight_number'] for f in body['flights']] == ['BT271', 'SN2901', 'OS311']
        assert body['summary']['closed'] == 1

    def test_parse_flight_data_requires_text(self, client):
        response = client.post('/api/parse-flight-data', json={'flight_text': ''})
        assert response.status_code == 400
        assert response.json()['detail']['example'] == FLIGHT_BOARD_FORMAT_EXAMPLE

    def test_standby_preview(self, client):
        payload = {'flights': [], 'standby_start': '08:00', 'standby_end': '14:00'}
        body = client.post('/api/standby-preview', json=payload).json()

        assert body['success']
        assert body['available_flights'] == []
        assert body['standby_period']['duration'] == 6.0
        assert body['message'] == 'Found 0 flights available during standby period'

    def test_standby_preview_requires_flights(self, client):
        response = client.post('/api/standby-preview',
                               json={'standby_start': '08:00', 'standby_end': '14:00'})
        assert response.status_code == 400
        assert response.json()['detail']['error'] == 'Invalid flights data'

    def test_standby_preview_time_format(self, client):
        payload = {'flights': [], 'standby_start': '8am', 'standby_end': '14:00'}
        response = client.post('/api/standby-preview', json=payload)
        assert response.status_code == 400
        assert response.json()['detail']['error'] == 'Invalid time format'

    def test_standby_type_validated(self, client):
        payload = {'flights': [], 'standby_start': '08:00', 'standby_end': '14:00',
                   'standby_type': 'hotel'}
        assert client.post('/api/standby-preview', json=payload).status_code == 422
