"""
Quality decision API tests

Every endpoint is stateless: requests carry their inputs and get a verdict
back in the {"success", "data"} envelope.
"""

import pytest

from garment_qc import create_app


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_unknown_endpoint(self, client):
        response = client.get('/api/quality/nope')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'NOT_FOUND'


class TestSamplingPlanEndpoints:

    def test_list_rows(self, client):
        data = client.get('/api/quality/sampling-plan').get_json()['data']
        assert len(data['rows']) == 11
        assert data['criticalAllowed'] == 0

    def test_lookup(self, client):
        response = client.get('/api/quality/sampling-plan/100')
        assert response.status_code == 200
        assert response.get_json()['data']['sampleSize'] == 20

    def test_lookup_undersized(self, client):
        response = client.get('/api/quality/sampling-plan/1')
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'INVALID_INPUT'
        assert body['field'] == 'lotSize'


class TestLotVerdict:

    def test_rework(self, client):
        response = client.post('/api/quality/lot-verdict', json={
            'lotSize': 100,
            'defects': [
                {'category': 'FINISHING', 'inspectionPoint': 'Trimming / Threads', 'critical': 0, 'major': 0, 'minor': 3},
                {'category': 'PACKAGING', 'point': 'Labels / Price Tags', 'critical': 0, 'major': 0, 'minor': 0},
            ],
        })
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['status'] == 'Rework'
        assert data['sampleSize'] == 20
        assert data['totals'] == {'critical': 0, 'major': 0, 'minor': 3}
        # zero-count entries stay in the audit record
        assert [d['inspectionPoint'] for d in data['defects']] == ['Trimming / Threads', 'Labels / Price Tags']

    def test_critical_fails(self, client):
        response = client.post('/api/quality/lot-verdict', json={
            'lotSize': 5000,
            'defects': [{'category': 'SAFETY', 'inspectionPoint': 'Nickel / Needle Test', 'critical': 1}],
        })
        data = response.get_json()['data']
        assert data['status'] == 'Failed'
        assert data['reasons'] == ['CRITICAL_FOUND']

    def test_no_defects_passes(self, client):
        response = client.post('/api/quality/lot-verdict', json={'lotSize': 20})
        assert response.get_json()['data']['status'] == 'Passed'

    def test_missing_lot_size(self, client):
        response = client.post('/api/quality/lot-verdict', json={'defects': []})
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'VALIDATION_ERROR'
        assert any(d.startswith('lotSize') for d in body['details'])

    def test_negative_count(self, client):
        response = client.post('/api/quality/lot-verdict', json={
            'lotSize': 100,
            'defects': [{'category': 'FABRIC', 'inspectionPoint': 'Holes', 'minor': -1}],
        })
        assert response.status_code == 400
        assert response.get_json()['error'] == 'INVALID_INPUT'

    def test_undersized_lot_clamped_when_configured(self):
        app = create_app('testing')
        app.config['UNDERSIZED_LOT_POLICY'] = 'clamp'
        with app.test_client() as client:
            response = client.post('/api/quality/lot-verdict', json={'lotSize': 1})
        assert response.status_code == 200
        assert response.get_json()['data']['sampleSize'] == 2


class TestMeasurementEndpoints:

    @pytest.mark.parametrize('actual,status', [(100.0005, 'Pass'), (100.5, 'WithinTolerance'), (100.51, 'Fail')])
    def test_evaluate(self, client, actual, status):
        response = client.post('/api/quality/measurements/evaluate', json={
            'designerMeasurement': 100, 'actualMeasurement': actual, 'tolerance': 0.5,
        })
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == status

    def test_negative_tolerance(self, client):
        response = client.post('/api/quality/measurements/evaluate', json={
            'designerMeasurement': 100, 'actualMeasurement': 100, 'tolerance': -1,
        })
        assert response.status_code == 400

    def test_sample_verdict_passes_with_tolerance_deviations(self, client):
        response = client.post('/api/quality/sample-verdict', json={'measurements': [
            {'id': 'm1', 'pointOfMeasure': 'Chest width', 'designerMeasurement': 52, 'tolerance': 0.5, 'actualMeasurement': 52.4},
            {'id': 'm2', 'pointOfMeasure': 'Sleeve length', 'designerMeasurement': 60, 'tolerance': 1, 'actualMeasurement': 59.2},
        ]})
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['status'] == 'Passed'
        assert [r['status'] for r in data['results']] == ['WithinTolerance', 'WithinTolerance']
        assert data['failedPoints'] == []

    def test_sample_verdict_fails(self, client):
        response = client.post('/api/quality/sample-verdict', json={'measurements': [
            {'id': 'm1', 'pointOfMeasure': 'Chest width', 'designerMeasurement': 52, 'tolerance': 0.5, 'actualMeasurement': 53},
        ]})
        data = response.get_json()['data']
        assert data['status'] == 'Failed'
        assert data['failedPoints'] == ['m1']

    def test_sample_verdict_incomplete(self, client):
        response = client.post('/api/quality/sample-verdict', json={'measurements': [
            {'id': 'm1', 'pointOfMeasure': 'Chest width', 'designerMeasurement': 52, 'tolerance': 0.5, 'actualMeasurement': 52},
            {'id': 'm2', 'pointOfMeasure': 'Sleeve length', 'designerMeasurement': 60, 'tolerance': 1},
        ]})
        assert response.status_code == 409
        body = response.get_json()
        assert body['error'] == 'INCOMPLETE_MEASUREMENTS'
        assert body['pending'] == ['m2']

    def test_sample_verdict_duplicate_ids(self, client):
        point = {'id': 'm1', 'pointOfMeasure': 'Chest width', 'designerMeasurement': 52, 'tolerance': 0.5, 'actualMeasurement': 52}
        response = client.post('/api/quality/sample-verdict', json={'measurements': [point, point]})
        assert response.status_code == 400

    def test_sample_verdict_requires_measurements(self, client):
        response = client.post('/api/quality/sample-verdict', json={'measurements': []})
        assert response.status_code == 400


def test_inspection_catalog(client):
    data = client.get('/api/quality/inspection-catalog').get_json()['data']
    assert [c['category'] for c in data['categories']][0] == 'FABRIC'


def test_bad_undersized_policy_rejected(monkeypatch):
    from garment_qc.config import TestingConfig
    monkeypatch.setattr(TestingConfig, 'UNDERSIZED_LOT_POLICY', 'ignore')
    with pytest.raises(ValueError):
        create_app('testing')
