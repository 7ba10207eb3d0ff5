"""JSON translation catalogues shipped as package data."""
