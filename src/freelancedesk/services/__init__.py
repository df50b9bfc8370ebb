"""Service layer: loads a snapshot, runs the domain calculators, wraps the result.

Services depend on domain and infrastructure.  They never import from
commands or output; every public operation returns a ServiceResult.
"""
