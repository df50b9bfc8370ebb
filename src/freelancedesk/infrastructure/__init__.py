"""Infrastructure layer: remote API access and snapshot files.

This layer depends on stdlib and third-party libs (httpx).
It must never import from services, commands, or output.
The service layer bridges between domain views and infrastructure.
"""
