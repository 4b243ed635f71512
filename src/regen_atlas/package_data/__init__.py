"""Data files that ship with the regen_atlas package."""
