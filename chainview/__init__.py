"""
Chain Rule Visualizer

Turns a subscription's ordered chain-proxy rules into a laid-out graph
and keeps node detail popovers inside the viewport.

LAYERS:
=======
dtos           -> read-only rule data from the admin API
mapper         -> preview JSON to DTOs, with recorded degradations
visualization  -> GraphBuilder, OverlayPositioner, ChainTopology
presentation   -> view models and display formatting
interaction    -> user intents
state          -> ChainVisualization (composition)
"""

__version__ = "0.1.0"
