"""Application settings (environment-overridable defaults)."""
