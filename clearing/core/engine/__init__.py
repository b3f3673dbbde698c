"""Core decision propagation utilities.

Responsibilities:
  - Provide the propagator, its store ports and result types.
  - Must not decide classification rules; consumes the rule table.
"""
