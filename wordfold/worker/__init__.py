"""Map and reduce steps executed for the coordinator."""
