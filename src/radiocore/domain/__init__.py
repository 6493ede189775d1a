"""Domain entities read from the station repository."""
