"""
Test suite for schemalog.

This package contains tests for all schemalog components:
- Unit tests for the structure model, naming, registry and generators
- Chain tests covering ordering and already-handled suppression
- CLI tests driving diff documents end to end
"""
