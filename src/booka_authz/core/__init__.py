"""Core building blocks: exceptions and value objects."""
