"""CircuitFlow — geometry and validation engine for an interactive PCB editor.

Subpackages, leaf-first:

  library   footprint templates (built-in catalog, DIP/header generators)
  board     placed components, traces, board snapshots, pin transforms
  geometry  cubic trace curves and spatial queries
  drc       clearance checking and its debounced scheduler
  editing   continuity maintenance and board edit operations
  export    GRBL G-code and static SVG output
  web       FastAPI JSON API over the engine
"""
