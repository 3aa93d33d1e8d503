"""
Account Resolution Module

Indexes account records out of the flat SDK configuration, selects the
account for a request (by UserName or default), and resolves its credential.
"""
