"""Service layer — install orchestration and reference synchronization.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
