"""Version 1 of the Customer Records API."""
