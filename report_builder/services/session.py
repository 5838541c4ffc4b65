"""
Report Session

Connects a SelectionStore to the CatalogService: issues the fetches that
store transitions call for and applies their results through the store's
stale-response guards.

- Choosing an analysis type fetches its three catalogs concurrently and applies
  them only if no newer analysis type was chosen meanwhile.
- Value options are fetched per filter; each fetch stands alone, so a slow or
  failing property does not hold up the others.
- Per-metric filter catalogs are fetched when a filterable metric is selected
  and dropped if the metric is deselected before they arrive.
"""

import asyncio
import logging
from typing import List, Optional

from report_builder.models.schemas import ActiveFilter, Metric, Property
from report_builder.services.catalog import CatalogService
from report_builder.services.projector import project, render_preview
from report_builder.services.selection_store import SelectionStore


logger = logging.getLogger(__name__)


class ReportSession:
    """Async driver for one report configuration."""

    def __init__(self, catalog: CatalogService, store: Optional[SelectionStore] = None):
        self.catalog = catalog
        self.store = store if store is not None else SelectionStore()

    async def load_analysis_types(self) -> List[str]:
        types = await self.catalog.fetch_analysis_types()
        self.store.set_analysis_types(types)
        return types

    async def choose_analysis_type(self, analysis_type: str) -> bool:
        """
        Select an analysis type and load its catalogs.

        Returns:
            True if the fetched catalogs were applied, False if a later
            selection superseded this one while it was in flight.
        """
        request = self.store.select_analysis_type(analysis_type)
        filters, segmentations, metrics = await self.catalog.fetch_type_catalogs(analysis_type)
        return self.store.apply_catalogs(request, filters, segmentations, metrics)

    async def load_value_options(self, filter_id: str) -> bool:
        active = self.store.find_filter(filter_id)
        if active is None:
            return False
        options = await self.catalog.fetch_property_values(active.propertyId)
        return self.store.set_value_options(filter_id, options)

    async def load_all_value_options(self) -> None:
        """Fetch options for every filter that has none yet, independently."""
        filter_ids = [f.id for f in self.store.filters]
        for metric in self.store.metrics:
            filter_ids.extend(f.id for f in metric.filters)
        pending = [fid for fid in filter_ids if fid not in self.store.value_options]
        if pending:
            await asyncio.gather(*(self.load_value_options(fid) for fid in pending))

    async def add_filter(self, prop: Property) -> ActiveFilter:
        active = self.store.add_filter(prop)
        await self.load_value_options(active.id)
        return active

    async def add_metric_filter(self, metric_id: str, prop: Property) -> ActiveFilter:
        active = self.store.add_metric_filter(metric_id, prop)
        await self.load_value_options(active.id)
        return active

    async def toggle_metric(self, metric: Metric) -> bool:
        selected = self.store.toggle_metric(metric)
        if selected and metric.hasFilters:
            properties = await self.catalog.fetch_metric_filters(metric.metricId)
            self.store.set_metric_filter_catalog(metric.metricId, properties)
        return selected

    def preview(self) -> str:
        return render_preview(project(self.store))
