"""Store client, schema and repositories."""
