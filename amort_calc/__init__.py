"""Fixed-rate loan amortization schedules."""
