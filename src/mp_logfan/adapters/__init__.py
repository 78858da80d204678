"""Adapters – concrete APM capabilities and datastore receivers."""
