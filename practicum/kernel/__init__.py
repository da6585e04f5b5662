"""
Kernel: models, identity, permissions, audit events and the error taxonomy.
"""
