"""Service layer for the product catalog."""
