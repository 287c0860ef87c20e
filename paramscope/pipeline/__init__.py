"""Output pipeline - shared rich console and styling helpers."""
