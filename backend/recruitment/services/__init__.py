"""Core services. Each call takes the Database handle explicitly."""
