"""
Application layer - Use cases and orchestration for Tip Triage.

This layer contains:
- Ports (abstract interfaces for repositories and external collaborators)
- Application services (intake, review queue, reputation ledger, review
  outcome processing, background monitors)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, api
"""

__all__: list[str] = []
