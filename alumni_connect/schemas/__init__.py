"""
Schemas module - Request/Response schemas for API endpoints.

Difference from services:
- Services: read/write MongoDB documents (plain dicts)
- Schemas: API contract (what client sends/receives)
"""
