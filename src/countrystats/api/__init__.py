"""API layer: canonical read surface for the HTTP server, CLI and export.

Key rules:

1. No SQLAlchemy imports - only call repo functions
2. No sorting/filtering here except through the view pipeline (export shaping)
3. Return StatsRow models or plain records keyed by column label
"""
