"""Ports for the membership context: repository protocols and exceptions."""
