"""
Schemas module - Request/Response schemas for API endpoints.

Schemas are the API contract (what client sends/receives); stored documents
use snake_case keys and are converted in jobboard.services.serializers.
"""
