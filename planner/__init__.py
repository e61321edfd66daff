"""
Wedding Planner - Source Package

A single-tenant planning assistant for one couple's wedding:
tasks, guests, budget scenarios and expenses, vendors, the day's
timeline and free-form notes.

DESIGN PRINCIPLES:
1. One project, one password, one user at a time
2. The document store is the only source of truth
3. Derived numbers are recomputed, never stored
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Wedding Planner Team"
