"""Board custom-field definitions, value validation, and lifecycle use cases."""
