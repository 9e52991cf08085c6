# Copyright(C) 2026 Anders Logg
# Licensed under the MIT License

import re
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from lxml import etree

from ..model import FeatureKind, TopoFeature, z_to_float
from .payload import solid_triangles
from ..logging import info

ns_core = "http://www.opengis.net/citygml/2.0"
ns_gml = "http://www.opengis.net/gml"
ns_bldg = "http://www.opengis.net/citygml/building/2.0"
ns_gen = "http://www.opengis.net/citygml/generics/2.0"
ns_wtr = "http://www.opengis.net/citygml/waterbody/2.0"
ns_tran = "http://www.opengis.net/citygml/transportation/2.0"
ns_veg = "http://www.opengis.net/citygml/vegetation/2.0"
ns_dem = "http://www.opengis.net/citygml/relief/2.0"
ns_brid = "http://www.opengis.net/citygml/bridge/2.0"
ns_imgeo = "http://www.geostandaarden.nl/imgeo/2.1"

nsmap = {
    None: ns_core,
    "gml": ns_gml,
    "bldg": ns_bldg,
    "gen": ns_gen,
    "wtr": ns_wtr,
    "tran": ns_tran,
    "veg": ns_veg,
    "dem": ns_dem,
    "brid": ns_brid,
}

# (namespace, element, lod1 geometry property) per multi-surface kind;
# terrain is written as a dem:ReliefFeature instead
_FEATURE_ELEMENTS = {
    FeatureKind.WATER: (ns_wtr, "WaterBody", "lod1MultiSurface"),
    FeatureKind.ROAD: (ns_tran, "Road", "lod1MultiSurface"),
    FeatureKind.FOREST: (ns_veg, "PlantCover", "lod1MultiSurface"),
    FeatureKind.SEPARATION: (ns_gen, "GenericCityObject", "lod1Geometry"),
    FeatureKind.BRIDGE: (ns_brid, "Bridge", "lod1MultiSurface"),
}

# attribute -> (namespace, element) of the IMGeo object information
_IMGEO_OBJECT_INFO = (
    ("creationdate", ns_core, "creationDate"),
    ("terminationdate", ns_core, "terminationDate"),
)
_IMGEO_REGISTRATION = (
    ("tijdstipregistratie", "tijdstipRegistratie"),
    ("eindregistratie", "eindRegistratie"),
    ("lv_publicatiedatum", "LV-publicatiedatum"),
    ("bronhouder", "bronhouder"),
    ("inonderzoek", "inOnderzoek"),
    ("relatievehoogteligging", "relatieveHoogteligging"),
    ("bgt_status", "bgt-status"),
    ("plus_status", "plus-status"),
)

# OGR string list as text, e.g. "(2:12,14)"
_STRING_LIST = re.compile(r"^\((\d+):(.*)\)$", re.S)

Point3 = Tuple[float, float, int]


def _pos_list(points: Sequence[Point3]) -> str:
    """Closed posList in metres; heights keep the sentinel as is."""
    points = list(points) + [points[0]]
    return " ".join(f"{x:.3f} {y:.3f} {z_to_float(z):.2f}" for x, y, z in points)


def _polygon(parent, rings: Sequence[Sequence[Point3]]):
    polygon = etree.SubElement(parent, "{%s}Polygon" % ns_gml)
    for i, ring in enumerate(rings):
        tag = "exterior" if i == 0 else "interior"
        boundary = etree.SubElement(polygon, "{%s}%s" % (ns_gml, tag))
        linear_ring = etree.SubElement(boundary, "{%s}LinearRing" % ns_gml)
        pos_list = etree.SubElement(linear_ring, "{%s}posList" % ns_gml)
        pos_list.attrib["srsDimension"] = "3"
        pos_list.text = _pos_list(ring)
    return polygon


def _multi_surface(parent, surfaces):
    multi_surface = etree.SubElement(parent, "{%s}MultiSurface" % ns_gml)
    for rings in surfaces:
        member = etree.SubElement(multi_surface, "{%s}surfaceMember" % ns_gml)
        _polygon(member, rings)
    return multi_surface


def _is_degenerate(triangle: Sequence[Point3]) -> bool:
    keys = {(round(x * 1000), round(y * 1000), z) for x, y, z in triangle}
    return len(keys) < 3


def _footprint_rings(feature: TopoFeature, z: int, reverse: bool):
    rings = []
    for ring in feature.footprint.rings:
        points = [(float(x), float(y), z) for x, y in ring]
        rings.append(points[::-1] if reverse else points)
    return rings


def _generic_attributes(element, feature: TopoFeature):
    for name, value in feature.attributes.items():
        attribute = etree.SubElement(element, "{%s}stringAttribute" % ns_gen)
        attribute.attrib["name"] = str(name)
        etree.SubElement(attribute, "{%s}value" % ns_gen).text = str(value)


def _city_object_member(parent, ns: str, tag: str, feature: TopoFeature):
    member = etree.SubElement(parent, "{%s}cityObjectMember" % ns_core)
    element = etree.SubElement(member, "{%s}%s" % (ns, tag))
    element.attrib["{%s}id" % ns_gml] = str(feature.id)
    return element


def _lod1_solid(parent, building):
    """LOD1 solid of roof, wall and floor triangles, or the extruded block."""
    lod1 = etree.SubElement(parent, "{%s}lod1Solid" % ns_bldg)
    solid = etree.SubElement(lod1, "{%s}Solid" % ns_gml)
    exterior = etree.SubElement(solid, "{%s}exterior" % ns_gml)
    shell = etree.SubElement(exterior, "{%s}CompositeSurface" % ns_gml)
    if building.parameters.triangulate:
        surfaces = [
            [list(tri)] for tri in solid_triangles(building) if not _is_degenerate(tri)
        ]
    else:
        surfaces = building.extruded_block()
    for rings in surfaces:
        surface_member = etree.SubElement(shell, "{%s}surfaceMember" % ns_gml)
        _polygon(surface_member, rings)
    return lod1


def _building_element(parent, building):
    element = _city_object_member(parent, ns_bldg, "Building", building)
    _generic_attributes(element, building)

    base = building.get_height_base()
    top = building.get_height()
    measure = etree.SubElement(element, "{%s}measureAttribute" % ns_gen)
    measure.attrib["name"] = "min height surface"
    value = etree.SubElement(measure, "{%s}value" % ns_gen)
    value.attrib["uom"] = "#m"
    value.text = f"{z_to_float(base):.2f}"
    height = etree.SubElement(element, "{%s}measuredHeight" % ns_bldg)
    height.attrib["uom"] = "#m"
    height.text = f"{z_to_float(top):.2f}"

    footprint = etree.SubElement(element, "{%s}lod0FootPrint" % ns_bldg)
    _multi_surface(footprint, [_footprint_rings(building, base, False)])
    roof_edge = etree.SubElement(element, "{%s}lod0RoofEdge" % ns_bldg)
    _multi_surface(roof_edge, [_footprint_rings(building, top, True)])

    _lod1_solid(element, building)
    return element


def _attribute(feature: TopoFeature, name: str):
    """Attribute value by case-insensitive name, or None."""
    for key, value in feature.attributes.items():
        if str(key).lower() == name:
            return value
    return None


def _string_list(value) -> List[str]:
    """Items of a list attribute, given as a sequence or as ``(N:a,b,...)``."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    text = str(value).strip()
    match = _STRING_LIST.match(text)
    if match is None:
        return [text] if text else []
    count = int(match.group(1))
    return match.group(2).split(",")[:count] if count else []


def _imgeo_object_info(element, feature: TopoFeature):
    for name, ns, tag in _IMGEO_OBJECT_INFO:
        value = _attribute(feature, name)
        if value is not None:
            etree.SubElement(element, "{%s}%s" % (ns, tag)).text = str(value)

    identificatie = etree.SubElement(element, "{%s}identificatie" % ns_imgeo)
    nen3610 = etree.SubElement(identificatie, "{%s}NEN3610ID" % ns_imgeo)
    etree.SubElement(nen3610, "{%s}namespace" % ns_imgeo).text = "NL.IMGeo"
    etree.SubElement(nen3610, "{%s}lokaalID" % ns_imgeo).text = str(feature.id)

    for name, tag in _IMGEO_REGISTRATION:
        value = _attribute(feature, name)
        if value is not None:
            etree.SubElement(element, "{%s}%s" % (ns_imgeo, tag)).text = str(value)


def _imgeo_house_numbers(parent, building):
    """
    Address labels of a building part.

    One ``nummeraanduidingreeks`` per label text that has both a placement
    point and an angle, with the lowest and highest house number
    identifiers when present.
    """
    texts = _string_list(_attribute(building, "tekst"))
    points = _string_list(_attribute(building, "plaatsingspunt"))
    angles = _string_list(_attribute(building, "hoek"))
    lowest = _string_list(_attribute(building, "identificatiebagvbolaagstehuisnummer"))
    highest = _string_list(_attribute(building, "identificatiebagvbohoogstehuisnummer"))

    for i, text in enumerate(texts):
        if i >= len(points) or i >= len(angles):
            break
        series_property = etree.SubElement(parent, "{%s}nummeraanduidingreeks" % ns_imgeo)
        series = etree.SubElement(series_property, "{%s}Nummeraanduidingreeks" % ns_imgeo)
        label_property = etree.SubElement(series, "{%s}nummeraanduidingreeks" % ns_imgeo)
        label = etree.SubElement(label_property, "{%s}Label" % ns_imgeo)
        etree.SubElement(label, "{%s}tekst" % ns_imgeo).text = text
        position = etree.SubElement(label, "{%s}positie" % ns_imgeo)
        label_position = etree.SubElement(position, "{%s}Labelpositie" % ns_imgeo)
        placement = etree.SubElement(label_position, "{%s}plaatsingspunt" % ns_imgeo)
        point = etree.SubElement(placement, "{%s}Point" % ns_gml)
        point.attrib["srsDimension"] = "2"
        etree.SubElement(point, "{%s}pos" % ns_gml).text = points[i].strip()
        etree.SubElement(label_position, "{%s}hoek" % ns_imgeo).text = angles[i].strip()
        if i < len(lowest):
            etree.SubElement(
                series, "{%s}identificatieBAGVBOLaagsteHuisnummer" % ns_imgeo
            ).text = lowest[i].strip()
        if i < len(highest):
            etree.SubElement(
                series, "{%s}identificatieBAGVBOHoogsteHuisnummer" % ns_imgeo
            ).text = highest[i].strip()


def _imgeo_building_element(parent, building):
    element = _city_object_member(parent, ns_bldg, "Building", building)
    _imgeo_object_info(element, building)
    part_property = etree.SubElement(element, "{%s}consistsOfBuildingPart" % ns_bldg)
    part = etree.SubElement(part_property, "{%s}BuildingPart" % ns_bldg)
    _lod1_solid(part, building)
    bag_id = _attribute(building, "identificatiebagpnd")
    if bag_id is not None:
        etree.SubElement(part, "{%s}identificatieBAGPND" % ns_imgeo).text = str(bag_id)
    _imgeo_house_numbers(part, building)
    return element


def _relief_element(parent, feature):
    element = _city_object_member(parent, ns_dem, "ReliefFeature", feature)
    _generic_attributes(element, feature)
    etree.SubElement(element, "{%s}lod" % ns_dem).text = "1"
    component = etree.SubElement(element, "{%s}reliefComponent" % ns_dem)
    tin = etree.SubElement(component, "{%s}TINRelief" % ns_dem)
    tin.attrib["{%s}id" % ns_gml] = f"{feature.id}-tin"
    etree.SubElement(tin, "{%s}lod" % ns_dem).text = "1"
    tin_property = etree.SubElement(tin, "{%s}tin" % ns_dem)
    surface = etree.SubElement(tin_property, "{%s}TriangulatedSurface" % ns_gml)
    patches = etree.SubElement(surface, "{%s}trianglePatches" % ns_gml)
    for tri in feature.triangle_points():
        if _is_degenerate(tri):
            continue
        triangle = etree.SubElement(patches, "{%s}Triangle" % ns_gml)
        exterior = etree.SubElement(triangle, "{%s}exterior" % ns_gml)
        linear_ring = etree.SubElement(exterior, "{%s}LinearRing" % ns_gml)
        pos_list = etree.SubElement(linear_ring, "{%s}posList" % ns_gml)
        pos_list.attrib["srsDimension"] = "3"
        pos_list.text = _pos_list(tri)
    return element


def _feature_element(parent, feature):
    if feature.kind == FeatureKind.TERRAIN:
        return _relief_element(parent, feature)
    ns, tag, geometry = _FEATURE_ELEMENTS[feature.kind]
    element = _city_object_member(parent, ns, tag, feature)
    _generic_attributes(element, feature)
    lod1 = etree.SubElement(element, "{%s}%s" % (ns, geometry))
    triangles = [
        [list(tri)] for tri in feature.triangle_points() if not _is_degenerate(tri)
    ]
    _multi_surface(lod1, triangles)
    return element


def to_citygml(
    features: Iterable[TopoFeature], name: str = "dtcc-lift", imgeo: bool = False
):
    """
    Build a CityGML 2.0 document of lifted features.

    Buildings carry the LOD0 footprint (at base height) and roof edge (at
    roof height) and an LOD1 solid made of the roof, wall and optional floor
    triangles, or of the extruded block when triangulation is disabled.
    Terrain is written as a ``dem:ReliefFeature`` with a TIN, bridges as
    ``brid:Bridge`` and the other features as LOD1 multi-surfaces of their
    lifted triangles.

    Parameters
    ----------
    features : iterable of TopoFeature
        Lifted features.
    name : str
        Name of the city model.
    imgeo : bool, default False
        Write buildings in the Dutch IMGeo 2.1 profile: NEN3610
        identification and registration attributes on the building, the
        LOD1 solid on a ``BuildingPart`` together with the BAG identifier
        and the address labels.

    Returns
    -------
    lxml.etree._Element
        The ``CityModel`` root element.
    """
    features = list(features)
    namespaces = dict(nsmap, imgeo=ns_imgeo) if imgeo else nsmap
    city_model = etree.Element("{%s}CityModel" % ns_core, nsmap=namespaces)
    etree.SubElement(city_model, "{%s}name" % ns_gml).text = name

    if features:
        xmin = min(f.footprint.bounds[0] for f in features)
        ymin = min(f.footprint.bounds[1] for f in features)
        xmax = max(f.footprint.bounds[2] for f in features)
        ymax = max(f.footprint.bounds[3] for f in features)
        bounded_by = etree.SubElement(city_model, "{%s}boundedBy" % ns_gml)
        envelope = etree.SubElement(bounded_by, "{%s}Envelope" % ns_gml)
        envelope.attrib["srsDimension"] = "3"
        etree.SubElement(envelope, "{%s}lowerCorner" % ns_gml).text = f"{xmin:.3f} {ymin:.3f} 0"
        etree.SubElement(envelope, "{%s}upperCorner" % ns_gml).text = f"{xmax:.3f} {ymax:.3f} 0"

    for feature in features:
        if feature.is_building():
            if imgeo:
                _imgeo_building_element(city_model, feature)
            else:
                _building_element(city_model, feature)
        else:
            _feature_element(city_model, feature)
    return city_model


def save_citygml(
    features: Iterable[TopoFeature], path, name: str = "dtcc-lift", imgeo: bool = False
):
    """Save lifted features to a CityGML 2.0 file, optionally as IMGeo."""
    path = Path(path)
    city_model = to_citygml(features, name=name, imgeo=imgeo)
    etree.ElementTree(city_model).write(
        str(path), pretty_print=True, xml_declaration=True, encoding="UTF-8"
    )
    members = city_model.findall("{%s}cityObjectMember" % ns_core)
    info(f"Saved CityGML with {len(members)} city objects to {path}")
