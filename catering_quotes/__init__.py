"""
Catering quote pricing and Square invoicing.

Pure pricing and order composition, plus a thin orchestrator that pushes
the result through Square as customer, order and published invoice.
"""
