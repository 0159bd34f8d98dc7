"""Domain services for CVMate."""
