"""Core services: Hyprland client, state store, picker and minimize engine."""
