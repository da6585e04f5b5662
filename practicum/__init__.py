"""
Practicum Portfolio: verification & approval service for teacher-training
portfolios.
"""

__version__ = "1.0.0"
