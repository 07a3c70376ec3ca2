"""Adapters for the ports: flag stores, notification sinks and the database models."""
