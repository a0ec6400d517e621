"""
Blueprint package — one sub-package per group of routes.
"""
