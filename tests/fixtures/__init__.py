"""Test fixtures and mocks for Inkwell."""
