"""Backend-facing services: session, report client, query building, tables."""
