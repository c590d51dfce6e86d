"""JSON web API for the amortization calculator."""
