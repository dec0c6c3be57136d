"""
Identity lookup package: resolves the username a password is validated against.
"""
