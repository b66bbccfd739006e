from __future__ import annotations

from typing import NewType

# =============================================================================
# GRID COORDINATE SYSTEM (Always integers)
# =============================================================================

GridCoord = int  # Always integer cell position

# Layout grid positions - x grows east, y grows north
GridPos = tuple[GridCoord, GridCoord]  # Example: (0, 0) = south-west corner

# =============================================================================
# CATALOG-RELATED TYPES
# =============================================================================

# Stable position of a tile definition inside a TileCatalog. Also used as the
# payload of placement events, so consumers can look the tile back up.
TileIndex = int

# =============================================================================
# GENERATION-RELATED TYPES
# =============================================================================

# Random seed for deterministic generation.
# Can be an int for numeric seeds or a descriptive string like "burrito1".
RandomSeed = int | str | None

# Real-world time elapsed between two host ticks.
DeltaTime = NewType("DeltaTime", float)
