"""External collaborators: phrase generation, speech capture and persistence."""
