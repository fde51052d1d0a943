"""User lookups and admin listing."""
