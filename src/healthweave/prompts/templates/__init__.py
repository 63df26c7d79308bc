"""Prompt template data modules."""
