"""
Services Layer
Read-side query helpers used primarily in routes.

Services should:
- Not modify models or go through the domain layer's write paths
- Be stateless (static methods)
- Return paginated results and plain dicts ready for JSON
"""
