"""
Test Module for the SelectionPanel presentation logic.
"""

import pytest

from report_builder.models.enums import PanelMode
from report_builder.models.schemas import Metric, Property
from report_builder.services.selection_panel import (
    FALLBACK_GROUP,
    SelectionPanel,
    group_items,
)
from report_builder.services.selection_store import SelectionError, SelectionStore


@pytest.fixture
def store() -> SelectionStore:
    store = SelectionStore()
    store.select_analysis_type('journeys')
    return store


@pytest.fixture
def properties(source_property, medium_property, company_property):
    return [source_property, company_property, medium_property]


class TestGroupItems:

    def test_groups_properties_by_scope_in_first_seen_order(self, properties):
        groups = group_items(properties)
        assert list(groups) == ['UTM', 'Company']
        assert [p.propertyLabel for p in groups['UTM']] == ['Source', 'Medium']

    def test_groups_metrics_by_group_label(self, sessions_metric, pipeline_metric):
        groups = group_items([sessions_metric, pipeline_metric])
        assert list(groups) == ['Engagement', 'Revenue']

    def test_missing_labels_fall_back_to_general(self):
        items = [
            Property(propertyId='1', propertyLabel='Source'),
            Property(propertyId='2', propertyLabel='Medium', propertyScopeLabel='  '),
            Metric(metricId='9', metricLabel='Spend'),
        ]
        groups = group_items(items)
        assert list(groups) == [FALLBACK_GROUP]
        assert len(groups[FALLBACK_GROUP]) == 3

    def test_empty(self):
        assert group_items([]) == {}


class TestOpenAndCollapse:

    def test_multiple_groups_start_collapsed(self, store, properties):
        panel = SelectionPanel(store, PanelMode.FILTER)
        panel.open(properties)
        assert panel.is_open
        assert panel.is_collapsed('UTM')
        assert panel.is_collapsed('Company')

    def test_single_group_starts_expanded(self, store, source_property, medium_property):
        panel = SelectionPanel(store, PanelMode.FILTER)
        panel.open([source_property, medium_property])
        assert not panel.is_collapsed('UTM')

    def test_toggle_group(self, store, properties):
        panel = SelectionPanel(store, PanelMode.FILTER)
        panel.open(properties)
        panel.toggle_group('UTM')
        assert not panel.is_collapsed('UTM')
        panel.toggle_group('UTM')
        assert panel.is_collapsed('UTM')

    def test_toggle_unknown_group_is_ignored(self, store, source_property):
        panel = SelectionPanel(store, PanelMode.FILTER)
        panel.open([source_property])
        panel.toggle_group('Nope')
        assert not panel.is_collapsed('Nope')

    def test_search_is_case_insensitive(self, store, properties):
        panel = SelectionPanel(store, PanelMode.FILTER)
        panel.open(properties)
        results = panel.search('MED')
        assert list(results) == ['UTM']
        assert [p.propertyId for p in results['UTM']] == ['2']
        assert list(panel.search('')) == ['UTM', 'Company']


class TestSelect:

    def test_filter_pick_adds_filter_and_closes(self, store, properties, source_property):
        panel = SelectionPanel(store, PanelMode.FILTER)
        panel.open(properties)

        panel.select(source_property)

        assert [f.propertyId for f in store.filters] == ['1']
        assert not panel.is_open

    def test_segmentation_pick_replaces_and_closes(self, store, properties, source_property, company_property):
        panel = SelectionPanel(store, PanelMode.SEGMENTATION)
        panel.open(properties)
        panel.select(source_property)
        panel.open(properties)
        panel.select(company_property)

        assert store.segmentation == company_property
        assert panel.is_selected(company_property)
        assert not panel.is_selected(source_property)
        assert not panel.is_open

    def test_segmentation_can_be_cleared(self, store, source_property):
        panel = SelectionPanel(store, PanelMode.SEGMENTATION)
        panel.open([source_property])
        panel.select(source_property)
        panel.open([source_property])
        panel.select(None)
        assert store.segmentation is None

    def test_metric_panel_stays_open_and_toggles(self, store, sessions_metric, pipeline_metric):
        panel = SelectionPanel(store, PanelMode.METRIC)
        panel.open([sessions_metric, pipeline_metric])

        panel.select(sessions_metric)
        panel.select(pipeline_metric)
        panel.select(sessions_metric)

        assert panel.is_open
        assert [m.metricId for m in store.metrics] == ['8']
        assert panel.is_selected(pipeline_metric)

    def test_metric_filter_pick_targets_metric(self, store, sessions_metric, source_property):
        store.toggle_metric(sessions_metric)
        panel = SelectionPanel(store, PanelMode.METRIC_FILTER, metric_id='7')
        panel.open([source_property])

        panel.select(source_property)

        assert store.filters == []
        assert [f.propertyId for f in store.get_metric('7').filters] == ['1']
        assert not panel.is_open

    def test_metric_filter_panel_needs_metric_id(self, store):
        with pytest.raises(SelectionError):
            SelectionPanel(store, PanelMode.METRIC_FILTER)

    def test_wrong_item_kind_is_rejected(self, store, sessions_metric, source_property):
        with pytest.raises(SelectionError):
            SelectionPanel(store, PanelMode.FILTER).select(sessions_metric)
        with pytest.raises(SelectionError):
            SelectionPanel(store, PanelMode.METRIC).select(source_property)
        assert store.filters == []
        assert store.metrics == []
