"""Domain layer — project manifest model and reference-file rules.

This layer depends only on stdlib, pydantic and click (for user-facing errors).
It must never import from services, infrastructure, commands, or config.
"""
