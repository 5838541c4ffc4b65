"""
Catalog Service

Consuming side of the QueryDispatcher. Fetches analysis types, per-type
catalogs (filters, segmentations, metrics), property value options and
per-metric filters, validating rows into catalog models.

Every fetch failure is caught here, logged, and degraded to an empty list so
callers never see an exception from a catalog load. The dispatcher is
blocking (BigQuery client), so each call runs in a worker thread; the three
per-type catalogs are fetched concurrently.
"""

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Protocol, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from report_builder.models.enums import QueryName
from report_builder.models.schemas import Metric, Property, PropertyValueOption


logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


class QueryExecutor(Protocol):
    def execute(self, query_name: Optional[str], params: Mapping[str, Optional[str]]) -> List[Any]:
        ...


class CatalogService:
    """Async, failure-tolerant access to the report component catalogs."""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    async def _fetch(self, name: QueryName, params: Mapping[str, str]) -> List[Any]:
        try:
            return await asyncio.to_thread(self.executor.execute, name.value, params)
        except Exception:
            logger.exception(f"Fetch failed for {name.value} {dict(params)}")
            return []

    async def _fetch_models(
        self,
        name: QueryName,
        params: Mapping[str, str],
        model: Type[ModelT],
    ) -> List[ModelT]:
        rows = await self._fetch(name, params)
        items: List[ModelT] = []
        for row in rows:
            try:
                items.append(model.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {model.__name__} row from {name.value}: {e.error_count()} errors")
        return items

    async def fetch_analysis_types(self) -> List[str]:
        rows = await self._fetch(QueryName.GET_ANALYSIS_TYPES, {})
        return [str(row) for row in rows if row]

    async def fetch_filters(self, analysis_type: str) -> List[Property]:
        return await self._fetch_models(
            QueryName.GET_FILTERS_FOR_TYPE, {'analysisType': analysis_type}, Property
        )

    async def fetch_segmentations(self, analysis_type: str) -> List[Property]:
        return await self._fetch_models(
            QueryName.GET_SEGMENTATIONS_FOR_TYPE, {'analysisType': analysis_type}, Property
        )

    async def fetch_metrics(self, analysis_type: str) -> List[Metric]:
        return await self._fetch_models(
            QueryName.GET_METRICS_FOR_TYPE, {'analysisType': analysis_type}, Metric
        )

    async def fetch_type_catalogs(
        self, analysis_type: str
    ) -> Tuple[List[Property], List[Property], List[Metric]]:
        """
        Fetch filters, segmentations and metrics for an analysis type concurrently.

        Returns only once all three have resolved.
        """
        filters, segmentations, metrics = await asyncio.gather(
            self.fetch_filters(analysis_type),
            self.fetch_segmentations(analysis_type),
            self.fetch_metrics(analysis_type),
        )
        return filters, segmentations, metrics

    async def fetch_property_values(self, property_id: str) -> List[PropertyValueOption]:
        return await self._fetch_models(
            QueryName.GET_PROPERTY_VALUES, {'propertyId': property_id}, PropertyValueOption
        )

    async def fetch_metric_filters(self, metric_id: str) -> List[Property]:
        return await self._fetch_models(
            QueryName.GET_FILTERS_FOR_METRIC, {'metricId': metric_id}, Property
        )
