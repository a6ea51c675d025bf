"""Core error-handling, taxonomy and observability for the research assistant."""
