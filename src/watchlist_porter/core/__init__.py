"""Core import/export pipeline: models, interfaces and services."""
