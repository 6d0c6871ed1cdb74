"""
Bounds shared by request schemas and path parameters
"""
from fastapi import Path

# Largest value an INTEGER column holds on PostgreSQL
MAX_INT = 2**31 - 1


def id_path(description: str):
    """Path parameter for a row ID"""
    return Path(..., gt=0, le=MAX_INT, description=description)
