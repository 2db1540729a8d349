"""Domain models and errors shared by every pipeline stage."""
