"""
Contract tests for GET/OPTIONS /api/query.

The application lifespan is not entered (TestClient is not used as a context
manager), so no BigQuery client is built; the dispatcher dependency is
overridden with one wrapping a mock client.
"""

from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from google.api_core.exceptions import Forbidden

from report_builder.core.dependencies import get_dispatcher
from report_builder.main import app
from report_builder.services.dispatcher import QueryDispatcher
from report_builder.tests.conftest import make_rows


@pytest.fixture
def client(dispatcher: QueryDispatcher) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestQueryEndpoint:

    def test_analysis_types(self, client, mock_bigquery_client):
        mock_bigquery_client.query.return_value.result.return_value = make_rows([
            {'analysis_type': 'journeys'},
            {'analysis_type': 'spend_performance'},
        ])

        response = client.get('/api/query', params={'queryName': 'getAnalysisTypes'})

        assert response.status_code == 200
        assert response.json() == ['journeys', 'spend_performance']

    def test_filters_for_type(self, client, mock_bigquery_client, filter_rows):
        mock_bigquery_client.query.return_value.result.return_value = make_rows(filter_rows)

        response = client.get(
            '/api/query',
            params={'queryName': 'getFiltersForType', 'analysisType': 'journeys'},
        )

        assert response.status_code == 200
        assert response.json() == filter_rows
        params = mock_bigquery_client.query.call_args.kwargs['job_config'].query_parameters
        assert params[0].value == 'journeys'

    def test_missing_query_name(self, client, mock_bigquery_client):
        response = client.get('/api/query')

        assert response.status_code == 400
        assert response.json() == {'error': 'Missing required parameter: queryName'}
        mock_bigquery_client.query.assert_not_called()

    def test_unknown_query_name(self, client):
        response = client.get('/api/query', params={'queryName': 'getUsers'})

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid queryName specified.'}

    def test_missing_required_parameter(self, client):
        response = client.get('/api/query', params={'queryName': 'getPropertyValues'})

        assert response.status_code == 400
        assert response.json() == {
            'error': 'Missing required parameter for getPropertyValues: propertyId'
        }

    def test_backend_failure(self, client, mock_bigquery_client):
        mock_bigquery_client.query.side_effect = Forbidden('Access Denied: user svc@x.iam')

        response = client.get(
            '/api/query',
            params={'queryName': 'getMetricsForType', 'analysisType': 'journeys'},
        )

        assert response.status_code == 500
        body = response.json()
        assert body == {'error': 'Failed to query BigQuery.', 'details': 'Forbidden'}


class TestCors:

    def test_options_returns_empty_200(self, client):
        response = client.options('/api/query')

        assert response.status_code == 200
        assert response.content == b''
        assert 'X-CSRF-Token' in response.headers['access-control-allow-headers']

    def test_preflight_allows_get(self, client):
        response = client.options(
            '/api/query',
            headers={
                'Origin': 'http://localhost:3000',
                'Access-Control-Request-Method': 'GET',
            },
        )

        assert response.status_code == 200
        assert response.content == b''
        assert response.headers['access-control-allow-origin'] in ('*', 'http://localhost:3000')
        assert response.headers['access-control-allow-credentials'] == 'true'
        assert 'GET' in response.headers['access-control-allow-methods']

    @pytest.mark.parametrize('requested_headers', ['authorization', 'content-type, x-api-version'])
    def test_preflight_with_request_headers_is_empty_200(self, client, requested_headers):
        response = client.options(
            '/api/query',
            headers={
                'Origin': 'http://localhost:3000',
                'Access-Control-Request-Method': 'GET',
                'Access-Control-Request-Headers': requested_headers,
            },
        )

        assert response.status_code == 200
        assert response.content == b''
        assert 'Content-Type' in response.headers['access-control-allow-headers']

    def test_preflight_does_not_run_a_query(self, client, mock_bigquery_client):
        client.options(
            '/api/query?queryName=getAnalysisTypes',
            headers={'Origin': 'http://localhost:3000', 'Access-Control-Request-Method': 'GET'},
        )

        mock_bigquery_client.query.assert_not_called()

    def test_simple_request_carries_allow_origin(self, client, mock_bigquery_client):
        mock_bigquery_client.query.return_value.result.return_value = make_rows([])

        response = client.get(
            '/api/query',
            params={'queryName': 'getAnalysisTypes'},
            headers={'Origin': 'https://reports.example.com'},
        )

        assert response.status_code == 200
        assert response.headers['access-control-allow-origin'] in ('*', 'https://reports.example.com')

    def test_error_responses_carry_allow_origin(self, client):
        response = client.get('/api/query', headers={'Origin': 'https://reports.example.com'})

        assert response.status_code == 400
        assert 'access-control-allow-origin' in response.headers


class TestServiceEndpoints:

    def test_health(self, client):
        assert client.get('/health').json() == {'status': 'healthy'}

    def test_root(self, client):
        body = client.get('/').json()
        assert body['name'] == 'Report Builder API'
        assert body['docs'] == '/docs'


def test_dispatcher_dependency_requires_lifespan():
    request = MagicMock()
    request.app.state = type('State', (), {})()

    with pytest.raises(RuntimeError):
        get_dispatcher(request)
