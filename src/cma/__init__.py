SCHEMA_VERSION = "cma-presentation-2024.1"
