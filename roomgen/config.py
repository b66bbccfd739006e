"""
Configuration constants.

Centralizes the default values used by the layout generator and its host
driver. Organized by functional area for easy maintenance.
"""

from typing import Literal

from roomgen.types import RandomSeed

# =============================================================================
# GENERAL
# =============================================================================

RANDOM_SEED: RandomSeed = None
# RANDOM_SEED = "burrito1"

# Stream name for the solver's random draws (jitter and tile choice share it).
GENERATION_RNG_DOMAIN = "generation.wfc"

# =============================================================================
# LAYOUT
# =============================================================================

# Grid size in rooms
DEFAULT_LEVEL_WIDTH = 7
DEFAULT_LEVEL_HEIGHT = 5

# Include east/west mirrored variants of the default rooms.
DEFAULT_INCLUDE_MIRRORS = False

# =============================================================================
# SOLVER
# =============================================================================

# Half-width of the uniform noise added to each cell's constraint score.
# Must stay below 0.5 so it only breaks ties between equally constrained cells.
CONSTRAINT_JITTER = 0.1

# What to do when a cell runs out of candidates.
DEFAULT_CONTRADICTION_POLICY: Literal["placeholder", "restart"] = "placeholder"

# =============================================================================
# HOST DRIVER
# =============================================================================

# Ticks per second for the CLI driver. None = uncapped.
DEFAULT_TICKS_PER_SECOND: float | None = None

# Safety cap for headless runs so a restart loop on an unsatisfiable catalog
# cannot spin forever.
DEFAULT_MAX_TICKS = 10_000

FPS_SAMPLE_SIZE = 64  # Number of tick time samples to track
