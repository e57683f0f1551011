"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Address search (Nominatim)
- Waypoint data (Google My Maps KML export)
- Device positioning (IP geolocation, fixed position)
- Rendering engines (Folium)
- Caching systems (in-memory)
"""
