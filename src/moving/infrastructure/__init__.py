"""Infrastructure layer: database engine, schema, migrations and repositories."""
