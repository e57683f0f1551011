"""Positioning adapters - Implementations of PositionProviderPort.

Available implementations:
- IpPositionProvider: approximate position from an IP geolocation service
- FixedPositionProvider: a configured position (kiosks, demos)
- NoPositionProvider: positioning is not available
"""

from .ip_provider import IpPositionProvider
from .static_provider import FixedPositionProvider, NoPositionProvider

__all__ = ["IpPositionProvider", "FixedPositionProvider", "NoPositionProvider"]
