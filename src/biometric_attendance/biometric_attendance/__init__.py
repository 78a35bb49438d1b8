"""Biometric attendance package.

Feature modules (scans, attendance, settings, reconciliation, ...) keep their
business rules in plain services over repository Protocols; Flask controllers
and MySQL adapters are thin layers around them.
"""
