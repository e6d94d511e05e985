"""Core application for the hospital backend.

This package contains models, serializers, views and route registrations
implementing the API contract expected by the front‑end application.
"""