"""Application package for the internship application tracker backend.

This package exposes the service, repository and model modules used by
the FastAPI application, plus a small HTTP client for the status board.
Individual modules contain the concrete implementations and documentation.
"""
