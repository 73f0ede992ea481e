"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.crux_connector import CruxConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "CruxConnector",
]
