"""freelancedesk: derived dashboards over freelancer client and project data."""

__version__ = "0.4.0"
