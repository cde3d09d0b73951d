"""Lambda entrypoints for the serverless app."""
