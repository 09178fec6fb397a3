"""
Infrastructure layer - External adapters for Tip Triage.

This layer contains:
- In-memory repository stubs (indexed queue storage, tipster ledger storage)
- HTTP adapters for case-management collaborators (httpx)
- Observability (structlog configuration, correlation IDs)

IMPORT RULES:
- CAN import from: domain, application (ports only)
- CANNOT import from: api
"""

__all__: list[str] = []
