"""core.contracts

Stable interfaces (ABCs) shared across features.

Features depend on these contracts, not on concrete implementations from
other features. This package only contains interfaces.
"""
