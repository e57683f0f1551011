from tourplanner.config import MapConfig
from tourplanner.domain.models import GeoPoint, LocationPoint
from tourplanner.services.route_composer import compose_route
from tourplanner.services.viewport import bounding_box, fit_viewport, visible_points


def test_empty_map_uses_default_view():
    config = MapConfig()
    viewport = fit_viewport([], config)

    assert viewport.center == GeoPoint(config.default_center_lat, config.default_center_lon)
    assert viewport.zoom == config.default_zoom
    assert viewport.bounds is None
    assert not viewport.is_fitted


def test_fits_all_points_with_padding():
    config = MapConfig(fit_padding_px=50)
    points = [GeoPoint(-34.0, 18.0), GeoPoint(-33.0, 19.5), GeoPoint(-33.5, 18.2)]

    viewport = fit_viewport(points, config)

    assert viewport.bounds == (GeoPoint(-34.0, 18.0), GeoPoint(-33.0, 19.5))
    assert viewport.padding_px == 50
    assert viewport.center == GeoPoint(-33.5, 18.75)
    assert viewport.is_fitted


def test_single_point_box_is_degenerate():
    point = GeoPoint(-33.9, 18.4)
    assert bounding_box([point]) == (point, point)


def test_visible_points_include_waypoints_and_route(start, brewery_a, brewery_b):
    route = compose_route(start, LocationPoint(), False, [brewery_a])

    points = visible_points([brewery_a, brewery_b], route)

    assert points == [
        brewery_a.coords,
        brewery_b.coords,
        start.coords,
        brewery_a.coords,
        start.coords,
    ]
