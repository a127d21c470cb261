"""Cluster API access: dynamic resource clients, events and the kind scheme."""
