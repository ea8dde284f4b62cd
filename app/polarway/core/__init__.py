"""Core provisioning engine: paths, settings, targets and orchestration."""
