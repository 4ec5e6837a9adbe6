"""Footprint library — templates, bundled catalog and parametric generators."""

from __future__ import annotations

import logging

from .models import Footprint, PinTemplate
from .loader import (
    LibraryResult, ValidationError, load_library, builtin_footprints, FOOTPRINTS_DIR,
)
from .generators import (
    JUNCTION_FOOTPRINT, JUNCTION_FOOTPRINT_ID,
    generate_dip_footprint, generate_header_footprint,
)

log = logging.getLogger("circuitflow.library")

_GENERATORS = {
    "dip_": generate_dip_footprint,
    "header_": generate_header_footprint,
}


def get_footprint(footprint_id: str) -> Footprint | None:
    """Resolve a footprint id.  Unknown or malformed ids return None."""
    if footprint_id == JUNCTION_FOOTPRINT_ID:
        return JUNCTION_FOOTPRINT
    for prefix, generate in _GENERATORS.items():
        if footprint_id.startswith(prefix):
            count = footprint_id[len(prefix):]
            if count.isdigit() and int(count) > 0:
                return generate(int(count))
            log.debug("Malformed parametric footprint id '%s'", footprint_id)
            return None
    return builtin_footprints().get(footprint_id)


__all__ = [
    # Models
    "Footprint", "PinTemplate",
    # Loader
    "LibraryResult", "ValidationError", "load_library", "builtin_footprints", "FOOTPRINTS_DIR",
    # Generators
    "JUNCTION_FOOTPRINT", "JUNCTION_FOOTPRINT_ID",
    "generate_dip_footprint", "generate_header_footprint",
    "get_footprint",
]
