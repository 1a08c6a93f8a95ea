"""navgraph: navigation-graph validation for declared routes, links and journeys."""

__version__ = "0.3.0"
