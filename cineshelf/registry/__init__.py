"""
Collection Registry Module.

In-process state shared across requests: collection snapshots and id
sequences.
"""
