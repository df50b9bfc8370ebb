"""Domain layer: freelancer records and the views calculated from them.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
