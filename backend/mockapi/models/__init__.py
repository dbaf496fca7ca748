"""ORM Models — SQLAlchemy declarative models for endpoints, records, tables and logs.

Invariants:
    - All models inherit from Base (db/base.py)
    - Endpoint is the aggregate root for records and request logs
    - DataTable owns its TableEndpoint association edges

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from mockapi.models.endpoint import Endpoint  # noqa: F401
from mockapi.models.endpoint_record import EndpointRecord  # noqa: F401
from mockapi.models.request_log import RequestLog  # noqa: F401
from mockapi.models.data_table import DataTable  # noqa: F401
from mockapi.models.table_endpoint import TableEndpoint  # noqa: F401
