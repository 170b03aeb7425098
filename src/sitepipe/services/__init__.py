"""Service layer: pipeline stages returning StageResult.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
