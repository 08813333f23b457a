"""HTTP API for CardioChat."""
