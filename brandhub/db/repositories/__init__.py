"""Repository modules: one per aggregate, plain functions taking a Session."""
