"""Domain layer: packages, dependency declarations, version rules.

This layer depends only on stdlib, pydantic, and semantic_version.
It must never import from services, infrastructure, commands, or config.
"""
