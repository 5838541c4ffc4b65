"""
Query Dispatcher

Maps a queryName onto one of the fixed report component templates, runs it on
BigQuery with bound parameters, and reshapes the rows.

Failure taxonomy (report_builder.core.exceptions):
- InvalidQuery: queryName missing or unrecognized
- MissingParameter: a template's required parameter is absent or blank
- BackendError: BigQuery failed; only the exception class name leaves the process

One dispatcher per process, created in the FastAPI lifespan with an explicit
bigquery.Client.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from google.cloud import bigquery

from report_builder.core.config import Settings
from report_builder.core.exceptions import BackendError, InvalidQuery, MissingParameter
from report_builder.models.enums import QueryName
from report_builder.sql.report_queries import (
    ANALYSIS_TYPE_COLUMN,
    QueryTemplate,
    get_query_template,
)


logger = logging.getLogger(__name__)


def resolve_query_name(query_name: Optional[str]) -> QueryName:
    """
    Resolve a wire queryName to its QueryName member.

    Raises:
        InvalidQuery: If query_name is empty or unrecognized.
    """
    if not query_name:
        raise InvalidQuery(query_name)
    try:
        return QueryName(query_name)
    except ValueError:
        raise InvalidQuery(query_name) from None


def bind_parameters(
    template: QueryTemplate,
    params: Mapping[str, Optional[str]],
) -> List[bigquery.ScalarQueryParameter]:
    """
    Build the typed query parameters for a template.

    Only the template's required parameters are bound; extra request
    parameters are ignored.

    Raises:
        MissingParameter: If a required parameter is absent or blank.
    """
    bound = []
    for name in template.required_params:
        value = params.get(name)
        if value is None or not str(value).strip():
            raise MissingParameter(template.name.value, name)
        bound.append(bigquery.ScalarQueryParameter(name, "STRING", str(value)))
    return bound


class QueryDispatcher:
    """
    Executes named report component queries against BigQuery.

    Args:
        client: BigQuery client built at startup.
        settings: Settings providing the warehouse table names.
    """

    def __init__(self, client: bigquery.Client, settings: Settings):
        self.client = client
        self.components_table = settings.report_components_table
        self.values_table = settings.property_values_table

    def execute(self, query_name: Optional[str], params: Mapping[str, Optional[str]]) -> List[Any]:
        """
        Run a named query.

        Args:
            query_name: Wire name, e.g. 'getFiltersForType'.
            params: Request parameters; required ones are bound by name.

        Returns:
            A list of strings for getAnalysisTypes, otherwise a list of row dicts.

        Raises:
            InvalidQuery, MissingParameter, BackendError
        """
        name = resolve_query_name(query_name)
        template = get_query_template(name)
        query_parameters = bind_parameters(template, params)

        sql = template.render(self.components_table, self.values_table)
        job_config = bigquery.QueryJobConfig(query_parameters=query_parameters)

        logger.info(f"Executing BigQuery query {name.value}")

        try:
            rows = self.client.query(sql, job_config=job_config).result()
            records = [dict(row.items()) for row in rows]
        except Exception as e:
            logger.exception(f"BigQuery error while running {name.value}")
            raise BackendError(details=e.__class__.__name__) from e

        logger.info(f"{name.value} returned {len(records)} rows")

        return self._reshape(name, records)

    @staticmethod
    def _reshape(name: QueryName, records: List[Dict[str, Any]]) -> List[Any]:
        if name is QueryName.GET_ANALYSIS_TYPES:
            return [record[ANALYSIS_TYPE_COLUMN] for record in records]
        return records
