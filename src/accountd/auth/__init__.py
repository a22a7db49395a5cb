"""Authentication and authorization.

Learn: Tokens are stateless JWTs carrying the user's id, name and role.
Two gates run as FastAPI dependencies in front of protected routes:
1. Auth gate → Bearer token present and valid → claims on request.state
2. Role gate → claims.role is one of the allowed roles

Passwords are bcrypt-hashed; legacy plaintext rows are upgraded on login.
"""
