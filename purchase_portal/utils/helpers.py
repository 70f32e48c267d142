"""
Helper Utilities
Common helper functions
"""

from typing import Any, Dict
from datetime import datetime


def format_currency(amount: float, currency: str = "INR") -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        str: Formatted currency string
    """
    if currency == "INR":
        return f"₹{amount:,.2f}"
    return f"{currency} {amount:,.2f}"


def year_month(moment: datetime) -> str:
    """Return the YYYYMM stamp used in requisition numbers"""
    return moment.strftime("%Y%m")


def model_to_dict(instance: Any) -> Dict[str, Any]:
    """
    Serialize a SQLAlchemy row into a plain dict of its columns

    Args:
        instance: Mapped model instance

    Returns:
        dict: Column name to value
    """
    return {column.name: getattr(instance, column.name) for column in instance.__table__.columns}


def get_client_ip(request) -> str:
    """
    Get client IP address from request

    Args:
        request: FastAPI request object

    Returns:
        str: Client IP address
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
