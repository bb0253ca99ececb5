"""GraphQL fragments shared by area queries and cache reads."""

CORE_CRAG_FIELDS = """
  fragment CoreCragFields on Area {
    __typename
    uuid
    areaName
    pathTokens
    totalClimbs
    metadata {
      lat
      lng
      leaf
      isBoulder
    }
    content {
      description
    }
  }
"""
