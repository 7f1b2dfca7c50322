"""HTTP API for the schedule loader."""
