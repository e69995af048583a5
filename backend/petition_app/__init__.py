"""Application package for the petition (dilekçe) submission backend.

This package exposes the gatekeeper, storage, service and rendering
modules used by the FastAPI application. Individual modules contain the
concrete implementations and documentation.
"""
