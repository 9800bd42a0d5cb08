"""Core of the Pebble calculator: language pipeline, errors, configuration."""
