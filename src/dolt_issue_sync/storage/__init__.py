"""Storage layer: database handle, schema, migrations and issue stores."""
