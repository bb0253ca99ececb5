"""Grade scales, grade helpers, the OpenBeta query client, and models.

Nothing here imports the MCP server; the tools in ``server.py`` are a thin
layer over these modules.
"""
