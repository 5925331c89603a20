"""
Presentation helpers shared by the API and the terminal dashboard.
"""

from typing import Any, Dict, Iterable

from relief.config import DEFAULT_MARKER_COLOR, MAP_CENTER, MAP_ZOOM, STATUS_COLORS
from relief.models import Resource


def marker_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_MARKER_COLOR)


def humanize(value: str) -> str:
    """"low_stock" -> "low stock"."""
    return value.replace("_", " ")


def to_geojson(resources: Iterable[Resource]) -> Dict[str, Any]:
    """GeoJSON FeatureCollection of resources, one Point per resource."""
    features = []
    for r in resources:
        features.append({
            "type": "Feature",
            "id": r.id,
            "geometry": {
                # GeoJSON order is (longitude, latitude)
                "type": "Point",
                "coordinates": [r.longitude, r.latitude],
            },
            "properties": {
                "name": r.name,
                "type": r.type,
                "status": r.status,
                "location_name": r.location_name,
                "address": r.address,
                "marker_color": marker_color(r.status),
            },
        })
    return {
        "type": "FeatureCollection",
        "features": features,
        "center": list(MAP_CENTER),
        "zoom": MAP_ZOOM,
    }
