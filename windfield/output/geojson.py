# ABOUTME: Turns resolved site records into a GeoJSON FeatureCollection
# ABOUTME: This is the payload the map layer loads as its wind source

from typing import Iterable

from windfield.wind.models import SiteWindResult


def site_feature(result: SiteWindResult) -> dict:
    """One Point feature per site, coordinates in GeoJSON [lon, lat] order."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [result.site.lon, result.site.lat],
        },
        "properties": result.as_properties(),
    }


def build_feature_collection(results: Iterable[SiteWindResult]) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [site_feature(result) for result in results],
    }
