from fastapi import Request

from stockroom.domain import stockroom


async def domain_context_middleware(request: Request, call_next):
    """Push the stockroom domain context for each request."""
    with stockroom.domain_context():
        return await call_next(request)
