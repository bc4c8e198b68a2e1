from .http_gateway import CardApiGateway

__all__ = ["CardApiGateway"]
