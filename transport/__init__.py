"""Platform transports (pure I/O)."""
