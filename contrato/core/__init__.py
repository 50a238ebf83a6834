"""Core configuration, logging and component wiring."""
