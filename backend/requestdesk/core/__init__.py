"""Configuration, logging, errors and dependency wiring."""
