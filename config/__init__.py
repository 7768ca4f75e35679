"""Static prompt and schema configuration."""
