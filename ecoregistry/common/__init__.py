"""Small helpers shared across ecoregistry packages."""
