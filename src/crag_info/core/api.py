"""Area queries against the OpenBeta API.

Both functions return sentinels instead of raising: callers render "no data"
as a normal state.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .clients.fragments import CORE_CRAG_FIELDS
from .clients.graphql import QueryClient, cache_id, get_client
from .models import CragsDetailsNear

logger = logging.getLogger(__name__)

API_ERROR = "API error"

CRAGS_NEAR = CORE_CRAG_FIELDS + """
  query CragsNear($placeId: String, $lng: Float, $lat: Float, $minDistance: Int, $maxDistance: Int, $includeCrags: Boolean) {
    cragsNear(placeId: $placeId, lnglat: {lat: $lat, lng: $lng}, minDistance: $minDistance, maxDistance: $maxDistance, includeCrags: $includeCrags) {
      count
      _id
      placeId
      crags {
        ...CoreCragFields
      }
    }
  }
"""


async def get_crag_details_near(
    lnglat: Sequence[float],
    distance_range: Sequence[int],
    place_id: str = "unspecified",
    include_crags: bool = False,
    client: Optional[QueryClient] = None,
) -> CragsDetailsNear:
    """Fetch crags near a coordinate, flattened across distance groups.

    Args:
        lnglat: (longitude, latitude).
        distance_range: (min_distance, max_distance) in meters.
        place_id: Opaque id echoed back with the result.
        include_crags: Ask the API to include crag details in each group.
        client: Query client; defaults to the shared one.

    Returns:
        CragsDetailsNear with the crags and place id, or an empty list and
        an error message if anything went wrong.
    """
    try:
        client = client or get_client()
        data = await client.query(
            CRAGS_NEAR,
            variables={
                "lng": lnglat[0],
                "lat": lnglat[1],
                "placeId": place_id,
                "minDistance": distance_range[0],
                "maxDistance": distance_range[1],
                "includeCrags": include_crags,
            },
            fetch_policy="cache-first",
        )
        groups = data["cragsNear"]
        crags = [crag for entry in groups for crag in (entry.get("crags") or [])]
        return CragsDetailsNear(data=crags, place_id=place_id)
    except Exception as e:
        logger.warning("cragsNear query failed for %s: %s", place_id, e)

    return CragsDetailsNear(data=[], error=API_ERROR, place_id=None)


def get_area_by_uuid(uuid: str, client: Optional[QueryClient] = None) -> Optional[dict]:
    """Fetch an area by uuid from the cache.

    Returns the cached area, or None if it is not cached.
    """
    try:
        client = client or get_client()
        area = client.read_fragment(cache_id("Area", uuid))
        if area is not None:
            return area
    except Exception as e:
        logger.warning("Cache read failed for area %s: %s", uuid, e)
        return None
    return None
