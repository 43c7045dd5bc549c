"""HTTP API for clawdev."""
