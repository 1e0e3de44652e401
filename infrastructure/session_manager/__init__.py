"""Session Manager demo stack."""
