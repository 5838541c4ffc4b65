'''
Report Builder Backend Test Suite

Test Modules:
-------------
- test_report_queries.py: query registry and parameterized SQL
- test_dispatcher.py: query dispatch, parameter binding, error taxonomy
- test_query_api.py: GET/OPTIONS /api/query contract and CORS
- test_warehouse.py: BigQuery credential resolution
- test_selection_store.py: store transitions and invariants
- test_projector.py: report configuration projection
- test_selection_panel.py: grouping, collapsing and selection
- test_catalog.py: catalog fetches, failure degradation, stale responses

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v
'''

__all__ = []
