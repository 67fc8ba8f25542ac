"""Color utility effects (util.* namespace)."""
