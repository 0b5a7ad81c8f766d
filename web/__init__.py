"""
Web application package for the deepsearch chess AI.

Provides a FastAPI-based REST API (POST /api/move) for requesting moves
over HTTP.
"""
