"""Nodes, properties and subtree reads."""
