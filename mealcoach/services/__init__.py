"""External API clients and the food search pipeline."""
