"""Locale data model, CSV dialect and file storage."""
