"""Configuration, logging, error taxonomy and database access."""
