"""
Haulix dispatch and billing tracker.

Loads move through dispatch (Open), billing (Billing) and history
(Completed) while revenue, cost and profit are derived from their fields.
"""

__version__ = "0.4.0"
