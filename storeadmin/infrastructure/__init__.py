"""Infrastructure layer: configuration, database, logging and file storage."""
