"""Users API: DTOs, validation, mapping, and JSON-Patch support."""
