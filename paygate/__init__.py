"""
paygate - signed payment requests and notification verification
for redirect-style payment gateways.
"""
__version__ = "1.0.0"
