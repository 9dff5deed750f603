"""Geography quiz on a 3D globe."""
