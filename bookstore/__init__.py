"""Bookstore CRUD service."""
