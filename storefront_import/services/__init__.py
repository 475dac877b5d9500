"""Import pipeline services: validation, the import driver, progress and summary output."""
