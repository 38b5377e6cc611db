"""Configuration — pydantic section models, TOML discovery, settings, logging."""
