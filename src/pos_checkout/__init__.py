"""Top-level package for the checkout counter.

Products and their capability records live in :mod:`products`, the
product store in :mod:`catalog`, the shopping cart in :mod:`cart` and the
validate-and-settle routine in :mod:`checkout`.
"""
