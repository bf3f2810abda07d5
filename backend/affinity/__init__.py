"""Interest affinity engine: similar-people recommendations from weighted interests."""
