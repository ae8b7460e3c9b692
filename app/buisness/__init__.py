"""
Domain layer for the property stock ledger.
Contains slip processing, the stock ledger, asset movement rules and the
maintenance workflow, separated from data persistence concerns.
"""
