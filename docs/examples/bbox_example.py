"""
# Bounding Box Example

An example of keeping a dragged box and four typed coordinate fields in sync with the
BoundingBoxController
"""


def main():
    """
    First, we build the two collaborators the controller talks to.
    The VectorLayerMapView keeps the drawn box in Web Mercator (EPSG:3857), just like a web map would,
    and the FieldFormBinding holds the four input fields and the warning line.
    """

    from bboxpicker.views.field_form import FieldFormBinding
    from bboxpicker.views.vector_map import VectorLayerMapView

    map_view = VectorLayerMapView()
    form = FieldFormBinding()

    """
    The controller subscribes to the map's drag and edit events and to the form's commits as soon as it is built:
    """

    from bboxpicker.controller.bounding_box import BoundingBoxController

    controller = BoundingBoxController(map_view, form)
    print(controller.state)

    """
    Let's pretend the user drags a box over Western Europe.
    The map reports the rectangle in map units (meters), so we project it first:
    """

    from bboxpicker.constructs.bounds import MapBounds

    raw = map_view.transform_to_map_crs(MapBounds(left=-10, bottom=35, right=20, top=60))
    map_view.drag(raw)

    print(controller.state)
    print(form.fields)

    """
    Now the user types a box over the Pacific that crosses the date line.
    The right longitude is stored as 190 so the box stays a single rectangle, but the form still shows -170:
    """

    form.fill("10", "170", "-10", "-170")
    form.submit()

    print(controller.bounds)
    print(controller.display_bounds())
    print(controller.bounds.to_geojson())

    """
    Invalid input never raises, it just shows a warning:
    """

    form.fill("10", "170", "10", "-170")
    form.submit()

    print(form.warning)

    """
    Lastly, the drawn features can be exported for plotting or saving:
    """

    gdf = map_view.features_to_geodataframe()
    print(gdf.to_crs(4326))


if __name__ == "__main__":
    main()
