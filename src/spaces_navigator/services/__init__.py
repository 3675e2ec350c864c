"""Service layer: Spaces resource managers and the navigation engine."""
