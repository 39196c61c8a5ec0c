"""HTTP API for facetbrowse."""
