"""
SDK core: account credential resolution for outbound API clients.
"""
