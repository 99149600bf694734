"""
ERP Services
Business logic behind the REST API
"""
