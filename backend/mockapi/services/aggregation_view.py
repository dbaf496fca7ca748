"""Aggregation View — one dataset from every endpoint associated with a table.

Invariants:
    - Endpoints iterated in association order; each contributes its non-empty
      records newest-first; contributions are concatenated, never re-sorted
    - Member endpoints' own schemas never filter what they contribute
    - rows mirror data one-to-one, projected onto the derived columns
"""

from typing import Any

from mockapi.core.aggregate_view import derive_columns, project_row
from mockapi.core.domain_types import TableId
from mockapi.core.field_schema import parse_fields
from mockapi.core.repository_protocols import (
    EndpointLike, EndpointRepository, RecordRepository, TableRepository,
)
from mockapi.models.data_table import DataTable
from mockapi.services.serializers import endpoint_summary, table_summary


class AggregationView:
    """Builds the aggregated representation of tables."""

    def __init__(
        self,
        endpoints: EndpointRepository,
        records: RecordRepository,
        tables: TableRepository,
    ):
        self.endpoints = endpoints
        self.records = records
        self.tables = tables

    async def members(self, table_id: TableId) -> list[EndpointLike]:
        return await self.endpoints.get_many(await self.tables.endpoint_ids(table_id))

    async def records_for(self, members: list[EndpointLike]) -> list[dict[str, Any]]:
        data: list[dict[str, Any]] = []
        for endpoint in members:
            data.extend(await self.records.list_for_endpoint(endpoint.id))
        return data

    async def build(self, table: DataTable) -> dict[str, Any]:
        members = await self.members(table.id)
        data = await self.records_for(members)
        columns = derive_columns(
            parse_fields(table.fields),
            (parse_fields(ep.fields) for ep in members),
            data,
        )
        view = table_summary(table)
        view["endpointIds"] = [ep.id for ep in members]
        view["endpoints"] = [
            {k: v for k, v in endpoint_summary(ep).items() if k != "createdAt"}
            for ep in members
        ]
        view["data"] = data
        view["columns"] = columns
        view["rows"] = [project_row(record, columns) for record in data]
        return view
