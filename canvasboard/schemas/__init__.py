"""Pydantic request/response schemas for the CanvasBoard API."""
