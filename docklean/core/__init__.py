"""Core infrastructure: settings, logging, subprocess and Docker CLI access."""
