"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Error handling and mapping
- Server middleware (request logging, response envelope)
- Security headers and rate limiting
- Logging configuration
"""
