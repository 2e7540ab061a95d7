"""
Delivery-stream transformation for CloudWatch Logs subscription data
"""

__version__ = "1.0.0"
