"""Resolution of user-supplied paths and JSON contexts."""
