"""
Pytest configuration for the garment QC engine tests
"""

import pytest
import sys
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))


@pytest.fixture(scope='session')
def app():
    """Create test application."""
    from garment_qc import create_app
    app = create_app('testing')
    app.config['TESTING'] = True
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def ledger():
    """A small ledger with one finding in two categories."""
    from garment_qc.models.defect_ledger import DefectLedger
    ledger = DefectLedger()
    ledger.upsert('FABRIC', 'Woven / Knit Material', 'minor', 2)
    ledger.upsert('PRODUCTION', 'Pattern / Seams', 'major', 1)
    return ledger
