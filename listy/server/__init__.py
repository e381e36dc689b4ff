"""HTTP API for driving a session from external collaborators."""
