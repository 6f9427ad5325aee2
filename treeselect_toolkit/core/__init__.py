"""GUI-agnostic selection engine: models, state, services and registry."""
